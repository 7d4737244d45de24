from tapedeck.logging import log_queue_operation
from tapedeck.models import Track


class TrackQueue:
    """Ordered list of tracks with a current position (in-memory, session-only)."""

    def __init__(self, tracks: list[Track] | None = None):
        self.tracks: tuple[Track, ...] = tuple(tracks or ())
        self.current_index: int | None = None
        self.generation = 0

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self):
        return iter(self.tracks)

    def replace(self, tracks: list[Track], current: Track | None = None) -> int | None:
        """Replace the queue with a new track list.

        The selected track stays selected if it is present in the new list
        (matched by id); otherwise the current index becomes None.

        Args:
            tracks: New ordered track list
            current: Track to keep selected (defaults to the current queue entry)

        Returns:
            Current index in the new queue, or None
        """
        current = current or self.current_track
        self.tracks = tuple(tracks)
        self.generation += 1
        self.current_index = self.index_of(current) if current is not None else None

        log_queue_operation(
            "replace",
            count=len(self.tracks),
            generation=self.generation,
            current_index=self.current_index,
        )
        return self.current_index

    def get(self, index: int | None) -> Track | None:
        """Get the track at index, or None if out of range."""
        if index is None or not (0 <= index < len(self.tracks)):
            return None
        return self.tracks[index]

    def index_of(self, track: Track) -> int | None:
        """Find a track's position by id.

        Returns:
            Index of the first track with the same id, or None
        """
        for i, candidate in enumerate(self.tracks):
            if candidate.id == track.id:
                return i
        return None

    def select(self, index: int | None) -> None:
        """Set the current position; out-of-range indices clear it."""
        self.current_index = index if self.get(index) is not None else None

    @property
    def current_track(self) -> Track | None:
        return self.get(self.current_index)

    def is_first(self) -> bool:
        return self.current_index == 0

    def is_last(self) -> bool:
        return self.current_index is not None and self.current_index == len(self.tracks) - 1
