"""Shuffle bag sampling and replay history for shuffle-mode navigation."""

import random
from collections import deque
from tapedeck.logging import log_queue_operation


class _Exhausted:
    """Sentinel returned when a finished shuffle cycle may not be refilled."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "EXHAUSTED"

    def __bool__(self):
        return False


EXHAUSTED = _Exhausted()


class HistoryStack:
    """Bounded stack of previously-current queue indices; the oldest entry is dropped first."""

    def __init__(self, limit: int = 50):
        if limit < 1:
            raise ValueError(f"history limit must be positive, got {limit}")
        self.limit = limit
        self._items = deque(maxlen=limit)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def push(self, index: int) -> None:
        self._items.append(index)

    def pop(self) -> int | None:
        return self._items.pop() if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def as_list(self) -> list[int]:
        """Oldest first."""
        return list(self._items)


class ShuffleSampler:
    """Without-replacement random sampler over queue positions.

    The bag holds the positions not yet presented in the current cycle. Once it
    runs dry the cycle is complete; it is refilled only when the caller allows
    it (repeat-all) or when no cycle has completed since the last reset.
    """

    def __init__(self, size: int = 0, history_limit: int = 50, rng: random.Random | None = None):
        self.size = size
        self.rng = rng or random.Random()
        self.history = HistoryStack(history_limit)
        self._bag: list[int] = []
        self.cycle_complete = False

    @property
    def bag(self) -> frozenset[int]:
        return frozenset(self._bag)

    def reset(self, size: int | None = None) -> None:
        """Discard the bag, history and cycle flag, optionally for a new queue size."""
        if size is not None:
            self.size = size
        self._bag = []
        self.history.clear()
        self.cycle_complete = False
        log_queue_operation("shuffle_reset", size=self.size)

    def _refill(self, current_index: int | None) -> None:
        self._bag = [i for i in range(self.size) if i != current_index]
        log_queue_operation("shuffle_refill", size=self.size, bag_size=len(self._bag), current_index=current_index)

    def next(self, current_index: int | None, allow_refill_after_cycle: bool):
        """Draw the next queue position.

        Args:
            current_index: Position currently playing (excluded from draws)
            allow_refill_after_cycle: Whether a finished cycle may start over

        Returns:
            Queue index, or EXHAUSTED when the cycle is complete and may not refill
        """
        if current_index in self._bag:
            self._bag.remove(current_index)

        if not self._bag:
            if self.cycle_complete and not allow_refill_after_cycle:
                return EXHAUSTED
            self._refill(current_index)

        if not self._bag:
            # Zero or one track: nothing else to present
            self.cycle_complete = True
            if allow_refill_after_cycle and current_index is not None:
                return current_index
            return EXHAUSTED

        index = self._bag.pop(self.rng.randrange(len(self._bag)))
        if not self._bag:
            self.cycle_complete = True
        return index

    def record(self, previous_index: int | None) -> None:
        """Push the position being left onto the history stack."""
        if previous_index is not None:
            self.history.push(previous_index)

    def previous(self, current_index: int | None) -> int | None:
        """Step back through history.

        The position being left goes back into the bag so later draws may
        present it again.

        Returns:
            Queue index to replay, or None if there is no usable history
        """
        while self.history:
            index = self.history.pop()
            if 0 <= index < self.size:
                break
        else:
            return None

        if current_index is not None and current_index not in self._bag and current_index != index:
            self._bag.append(current_index)
        if index in self._bag:
            self._bag.remove(index)
        return index
