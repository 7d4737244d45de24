"""Next/previous decisions under shuffle and repeat modes.

The navigator only decides where playback should go. Committing the decision
(history, current index, transport state) is the orchestrator's job.
"""

from dataclasses import dataclass
from tapedeck.queue import TrackQueue
from tapedeck.repeat import RepeatCycle
from tapedeck.shuffle import EXHAUSTED, ShuffleSampler


@dataclass(frozen=True)
class Move:
    """Make ``index`` the current position and play it."""

    index: int


@dataclass(frozen=True)
class Restart:
    """Replay the current track from the start."""


@dataclass(frozen=True)
class Stay:
    """Leave everything as it is."""

    reason: str = ""


@dataclass(frozen=True)
class Stop:
    """Keep the current position but stop playback."""

    reason: str = ""


class Navigator:
    def __init__(self, queue: TrackQueue, sampler: ShuffleSampler, repeat: RepeatCycle):
        self.queue = queue
        self.sampler = sampler
        self.repeat = repeat
        self.shuffle_enabled = False

    def next(self, manual: bool = True):
        """Decide the next position.

        Manual navigation never stops playback: running off the end of the
        queue is a no-op. Auto-advance (the current track ended) replays the
        track under repeat-one and stops at the end of a non-wrapping queue.

        Args:
            manual: True for user-initiated next, False for track completion

        Returns:
            Move, Restart, Stay or Stop
        """
        current = self.queue.current_index
        if current is None or not len(self.queue):
            return Stay("no_current_track")

        if not manual and self.repeat.repeats_track:
            return Restart()

        if self.shuffle_enabled:
            index = self.sampler.next(current, allow_refill_after_cycle=self.repeat.wraps)
            if index is EXHAUSTED:
                return Stay("shuffle_exhausted") if manual else Stop("shuffle_exhausted")
            return Move(index)

        if current < len(self.queue) - 1:
            return Move(current + 1)
        if self.repeat.wraps:
            return Move(0)
        return Stay("end_of_queue") if manual else Stop("end_of_queue")

    def previous(self):
        """Decide the previous position.

        In shuffle mode forward order is random, so previous replays history
        instead of stepping back one position.

        Returns:
            Move or Stay
        """
        current = self.queue.current_index
        if current is None or not len(self.queue):
            return Stay("no_current_track")

        if self.shuffle_enabled:
            index = self.sampler.previous(current)
            if index is None:
                return Stay("no_history")
            return Move(index)

        if current > 0:
            return Move(current - 1)
        return Stay("start_of_queue")

    def has_next(self) -> bool:
        """Whether a manual next would move somewhere (without drawing from the bag)."""
        current = self.queue.current_index
        if current is None or not len(self.queue):
            return False
        if self.repeat.wraps:
            return True
        if self.shuffle_enabled:
            return bool(self.sampler.bag - {current}) or (not self.sampler.cycle_complete and len(self.queue) > 1)
        return current < len(self.queue) - 1

    def has_previous(self) -> bool:
        current = self.queue.current_index
        if current is None or not len(self.queue):
            return False
        if self.shuffle_enabled:
            return bool(self.sampler.history)
        return current > 0
