"""Sleep timer: counts down active playback time, fades out, then stops playback."""

import threading
import time
from dataclasses import dataclass
from tapedeck.logging import log_timer_event, start_action, timer_logger
from tapedeck.models import SleepTimerState

DEFAULT_SLEEP_OPTIONS = (0, 15, 30, 60, 120)


@dataclass(frozen=True)
class TimerTick:
    """Outcome of one countdown tick."""

    counted: bool = False
    fading: bool = False
    expired: bool = False
    restore_volume: float | None = None


def format_remaining(seconds: int) -> str:
    """Format remaining sleep time for display.

    Examples:
        >>> format_remaining(0)
        ''
        >>> format_remaining(75)
        '1:15'
        >>> format_remaining(7260)
        '2h 1m'
    """
    if seconds <= 0:
        return ""
    mins, secs = divmod(seconds, 60)
    if mins >= 60:
        hrs, remain_mins = divmod(mins, 60)
        return f"{hrs}h {remain_mins}m"
    return f"{mins}:{secs:02d}"


class SleepTimer:
    """Sleep timer state machine.

    Idle (0 minutes) -> Armed -> Fading (last ``fade_window`` seconds) -> Expired.
    Toggling walks the fixed option cycle; each arm captures the volume to
    restore when the timer expires or is cancelled.
    """

    def __init__(self, options=DEFAULT_SLEEP_OPTIONS, fade_window: int = 30):
        self.options = tuple(options)
        if not self.options or self.options[0] != 0:
            raise ValueError(f"sleep options must start with 0 (disabled), got {self.options}")
        self.fade_window = fade_window
        self.selected_minutes = 0
        self.remaining_seconds = 0
        self.fading = False
        self.captured_volume: float | None = None

    @property
    def armed(self) -> bool:
        return self.selected_minutes > 0

    @property
    def state(self) -> SleepTimerState:
        return SleepTimerState(self.selected_minutes, self.remaining_seconds, self.fading)

    @property
    def remaining_label(self) -> str:
        return format_remaining(self.remaining_seconds)

    def toggle(self, current_volume: float) -> float | None:
        """Advance to the next duration in the cycle.

        Args:
            current_volume: The user's volume, captured as the new restore point

        Returns:
            Volume to restore when the cycle wraps back to 0, otherwise None
        """
        position = self.options.index(self.selected_minutes) if self.selected_minutes in self.options else 0
        minutes = self.options[(position + 1) % len(self.options)]

        with start_action(timer_logger, "sleep_timer_toggle", old_minutes=self.selected_minutes, new_minutes=minutes):
            if minutes == 0:
                return self.cancel()

            self.selected_minutes = minutes
            self.remaining_seconds = minutes * 60
            self.fading = self.remaining_seconds <= self.fade_window
            self.captured_volume = current_volume

            log_timer_event(
                "armed",
                minutes=minutes,
                captured_volume=current_volume,
                description=f"Sleep timer set to {minutes} minutes",
            )
            return None

    def cancel(self) -> float | None:
        """Disable the timer.

        Returns:
            The captured volume to restore, or None if the timer was idle
        """
        if not self.armed and self.captured_volume is None:
            return None

        restore = self.captured_volume
        self.selected_minutes = 0
        self.remaining_seconds = 0
        self.fading = False
        self.captured_volume = None

        log_timer_event("cancelled", restore_volume=restore, description="Sleep timer off")
        return restore

    def tick(self, is_playing: bool) -> TimerTick:
        """Count down one second of playback.

        Paused or stopped playback does not count.
        """
        if not self.armed or not is_playing:
            return TimerTick()

        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        log_timer_event("timer_tick", remaining=self.remaining_seconds)

        if self.remaining_seconds == 0:
            restore = self.captured_volume
            self.selected_minutes = 0
            self.fading = False
            self.captured_volume = None
            log_timer_event("expired", restore_volume=restore, description="Sleep timer expired, stopping playback")
            return TimerTick(counted=True, expired=True, restore_volume=restore)

        if not self.fading and self.remaining_seconds <= self.fade_window:
            self.fading = True
            log_timer_event("fading", remaining=self.remaining_seconds, description="Sleep timer fading out")

        return TimerTick(counted=True, fading=self.fading)

    def effective_volume(self, user_volume: float) -> float:
        """Output volume: the fade ramp while fading, otherwise the user's volume."""
        if not self.fading or self.captured_volume is None:
            return user_volume
        return max(0.0, self.captured_volume * (self.remaining_seconds / self.fade_window))


class Countdown:
    """Recurring tick driver on ``threading.Timer``.

    At most one timer thread is pending per countdown. ``start`` replaces any
    running loop. ``pause`` stops it and remembers how much of the current
    interval was left, so the next ``start`` fires after only that remainder;
    ``cancel`` stops it and forgets. The callback receives the loop's
    generation so a tick already in flight during a replace can be recognised
    with ``is_current`` and dropped.
    """

    def __init__(self, callback, interval: float = 1.0):
        self.callback = callback
        self.interval = interval
        self._timer: threading.Timer | None = None
        self._running = False
        self._generation = 0
        self._delay = interval
        self._scheduled_at = 0.0
        self._remaining: float | None = None
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._running

    def is_current(self, generation: int) -> bool:
        """Whether a tick carrying ``generation`` belongs to the running loop."""
        return self._running and generation == self._generation

    def start(self) -> None:
        with self._lock:
            delay = self.interval if self._remaining is None else self._remaining
            self._stop_locked()
            self._remaining = None
            self._running = True
            self._schedule_locked(self._generation, delay)

    def pause(self) -> None:
        """Stop ticking, keeping the unelapsed part of the pending interval."""
        with self._lock:
            if self._running and self._timer is not None:
                elapsed = time.monotonic() - self._scheduled_at
                self._remaining = max(0.0, self._delay - elapsed)
            self._stop_locked()

    def cancel(self) -> None:
        with self._lock:
            self._stop_locked()
            self._remaining = None

    def _stop_locked(self) -> None:
        self._generation += 1
        self._running = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_locked(self, generation: int, delay: float) -> None:
        self._delay = delay
        self._scheduled_at = time.monotonic()
        self._timer = threading.Timer(delay, self._fire, args=(generation,))
        self._timer.daemon = True
        self._timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None

        self.callback(generation)

        with self._lock:
            if generation == self._generation and self._timer is None:
                self._schedule_locked(generation, self.interval)
