from tapedeck.models import RepeatMode

REPEAT_CYCLE = (RepeatMode.NONE, RepeatMode.ALL, RepeatMode.ONE)


class RepeatCycle:
    """Three-state repeat toggle: none -> all -> one -> none."""

    def __init__(self, mode: RepeatMode = RepeatMode.NONE):
        self.mode = RepeatMode(mode)

    def toggle(self) -> RepeatMode:
        """Advance to the next mode in the cycle and return it."""
        position = REPEAT_CYCLE.index(self.mode)
        self.mode = REPEAT_CYCLE[(position + 1) % len(REPEAT_CYCLE)]
        return self.mode

    @property
    def wraps(self) -> bool:
        """Whether navigation wraps around (and shuffle refills) at the end of the queue."""
        return self.mode is RepeatMode.ALL

    @property
    def repeats_track(self) -> bool:
        return self.mode is RepeatMode.ONE
