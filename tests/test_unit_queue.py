"""Unit tests for TrackQueue."""

import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tapedeck.models import Track
from tapedeck.queue import TrackQueue
from tests.helpers.tracks import make_tracks


@pytest.fixture
def queue(tracks):
    return TrackQueue(tracks)


class TestTrackQueueInitialization:
    def test_initialization(self, queue, tracks):
        """A new queue holds the tracks in order with nothing selected."""
        assert queue.tracks == tuple(tracks)
        assert len(queue) == 5
        assert queue.current_index is None
        assert queue.current_track is None
        assert queue.generation == 0

    def test_empty_queue(self):
        queue = TrackQueue()
        assert len(queue) == 0
        assert queue.get(0) is None


class TestTrackQueueIndexing:
    def test_get_in_range(self, queue, tracks):
        assert queue.get(2) == tracks[2]

    @pytest.mark.parametrize("index", [-1, 5, 100, None])
    def test_get_out_of_range(self, queue, index):
        assert queue.get(index) is None

    def test_index_of_matches_by_id(self, queue):
        """Lookup uses the id, not field equality."""
        same_id = Track(id="track3", url="http://elsewhere/other.m3u8", title="Renamed")
        assert queue.index_of(same_id) == 3

    def test_index_of_missing(self, queue):
        assert queue.index_of(Track(id="nope", url="u", title="t")) is None

    def test_select_valid_index(self, queue, tracks):
        queue.select(1)
        assert queue.current_index == 1
        assert queue.current_track == tracks[1]

    def test_select_invalid_index_clears(self, queue):
        queue.select(1)
        queue.select(9)
        assert queue.current_index is None

    def test_first_and_last(self, queue):
        queue.select(0)
        assert queue.is_first()
        assert not queue.is_last()
        queue.select(4)
        assert queue.is_last()
        assert not queue.is_first()


class TestTrackQueueReplace:
    def test_replace_keeps_selected_track(self, queue, tracks):
        """The selected track follows its id into the new list."""
        queue.select(2)
        reordered = [tracks[4], tracks[2], tracks[0]]

        index = queue.replace(reordered)

        assert index == 1
        assert queue.current_track == tracks[2]
        assert queue.generation == 1

    def test_replace_drops_missing_selection(self, queue, tracks):
        queue.select(2)
        queue.replace(make_tracks(3, prefix="other"))
        assert queue.current_index is None

    def test_replace_with_explicit_current(self, queue, tracks):
        """A track selected outside the queue is located when it appears."""
        outsider = Track(id="outsider", url="http://inventory.test/outsider.m3u8", title="Outsider")
        queue.replace([*tracks, outsider], current=outsider)
        assert queue.current_index == 5

    def test_replace_with_empty_list(self, queue):
        queue.select(0)
        assert queue.replace([]) is None
        assert len(queue) == 0
