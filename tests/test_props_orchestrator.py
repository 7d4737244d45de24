"""Property-based tests for PlaybackOrchestrator using Hypothesis.

Each example builds its own orchestrator so state never leaks between
generated inputs.
"""

import random
import sys
from hypothesis import given, strategies as st
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tapedeck.models import PlaybackState, RepeatMode
from tapedeck.orchestrator import PlaybackOrchestrator
from tests.helpers.tracks import make_tracks
from tests.mocks import RecordingEngine

PLAYBACK_ACTIONS = ["next", "auto_advance", "previous", "toggle_play_pause", "toggle_shuffle", "play_random"]


def build_player(size, seed=0, repeat=RepeatMode.NONE, shuffle=False):
    player = PlaybackOrchestrator(
        engine=RecordingEngine(),
        sleep_options=(0, 1, 2),
        fade_window=30,
        tick_interval=3600,
        rng=random.Random(seed),
    )
    player.set_queue(make_tracks(size))
    while player.repeat_mode is not repeat:
        player.toggle_repeat()
    if shuffle:
        player.toggle_shuffle()
    return player


class TestRepeatProperties:
    @given(size=st.integers(min_value=1, max_value=20), data=st.data(), advances=st.integers(min_value=1, max_value=30))
    def test_repeat_one_auto_advance_is_idempotent(self, size, data, advances):
        start = data.draw(st.integers(min_value=0, max_value=size - 1))
        shuffle = data.draw(st.booleans())
        player = build_player(size, repeat=RepeatMode.ONE, shuffle=shuffle)
        player.play_track(player.tracks[start])

        for _ in range(advances):
            player.auto_advance()

        assert player.current_index == start
        assert player.restart_count == advances
        assert player.is_playing
        player.close()

    @given(size=st.integers(min_value=2, max_value=30))
    def test_repeat_all_wraps_from_last(self, size):
        player = build_player(size, repeat=RepeatMode.ALL)
        player.play_track(player.tracks[size - 1])

        player.next()

        assert player.current_index == 0
        player.close()

    @given(size=st.integers(min_value=1, max_value=30), manual=st.booleans())
    def test_no_repeat_never_wraps(self, size, manual):
        player = build_player(size)
        player.play_track(player.tracks[size - 1])

        if manual:
            player.next()
        else:
            player.auto_advance()

        assert player.current_index == size - 1
        expected = PlaybackState.PLAYING if manual else PlaybackState.STOPPED
        assert player.playback_state is expected
        player.close()

    @given(toggles=st.integers(min_value=0, max_value=20))
    def test_repeat_cycle_period_is_three(self, toggles):
        player = build_player(3)
        for _ in range(toggles * 3):
            player.toggle_repeat()
        assert player.repeat_mode is RepeatMode.NONE
        player.close()


class TestShuffleProperties:
    @given(size=st.integers(min_value=2, max_value=25), seed=st.integers())
    def test_shuffle_plays_every_track_once_per_cycle(self, size, seed):
        player = build_player(size, seed=seed, shuffle=True)
        player.play_track(player.tracks[0])

        seen = {0}
        for _ in range(size - 1):
            player.auto_advance()
            seen.add(player.current_index)

        assert seen == set(range(size))

        player.auto_advance()
        assert player.playback_state is PlaybackState.STOPPED
        player.close()


class TestActionSequenceProperties:
    """Arbitrary user and engine action sequences keep the orchestrator consistent."""

    @given(
        size=st.integers(min_value=0, max_value=12),
        repeat=st.sampled_from(list(RepeatMode)),
        actions=st.lists(st.sampled_from(PLAYBACK_ACTIONS), max_size=120),
        seed=st.integers(),
    )
    def test_invariants_hold(self, size, repeat, actions, seed):
        rng = random.Random(seed)
        player = build_player(size, seed=seed, repeat=repeat)

        for action in actions:
            if action == "play_random":
                if size:
                    player.play_track(player.tracks[rng.randrange(size)])
            else:
                getattr(player, action)()

            if player.current_index is not None:
                assert 0 <= player.current_index < size
                assert player.current_track == player.tracks[player.current_index]
            assert len(player.history) <= 50
            assert all(0 <= index < size for index in player.history)
            assert all(0 <= index < size for index in player.sampler.bag)
            assert player.repeat_mode is repeat

        player.close()

    @given(volumes=st.lists(st.floats(min_value=-2.0, max_value=3.0, allow_nan=False), min_size=1, max_size=20))
    def test_volume_always_in_range(self, volumes):
        player = build_player(2)
        for volume in volumes:
            player.set_volume(volume)
            assert 0.0 <= player.volume <= 1.0
            assert 0.0 <= player.effective_volume <= player.volume
        player.close()


class TestSleepTimerProperties:
    @given(volume=st.floats(min_value=0.0, max_value=1.0, allow_nan=False), pauses=st.sets(st.integers(0, 119)))
    def test_fade_is_monotonic_and_restores(self, volume, pauses):
        """One-minute timer: volume never rises during the fade and is restored on expiry."""
        player = build_player(3)
        player.set_volume(volume)
        player.play_track(player.tracks[0])
        player.toggle_sleep_timer()

        levels = []
        for step in range(200):
            if player.playback_state is PlaybackState.STOPPED:
                break
            if step in pauses:
                player.toggle_play_pause()
                player.tick()
                player.toggle_play_pause()
            player.tick()
            levels.append(player.effective_volume)

        assert player.playback_state is PlaybackState.STOPPED
        assert player.volume == volume
        assert not player.sleep_state.armed
        assert all(later <= earlier + 1e-9 for earlier, later in zip(levels, levels[1:-1]))
        player.close()
