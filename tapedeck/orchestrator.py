"""Playback orchestrator.

Owns which track is current, what next/previous mean under shuffle and repeat,
the replay history, volume/mute, and the sleep timer. The UI and the streaming
engine observe and drive a single ``PlaybackOrchestrator`` instance created for
the application session.
"""

import numbers
import random
import threading
from config import DEFAULT_VOLUME, FADE_WINDOW_SECONDS, HISTORY_LIMIT, SLEEP_OPTIONS, TICK_INTERVAL
from tapedeck.engine import NullEngine
from tapedeck.errors import EngineError
from tapedeck.logging import log_error, log_player_action, player_logger, start_action
from tapedeck.models import PlaybackState, RepeatMode, SleepTimerState, Track
from tapedeck.navigation import Move, Navigator, Restart, Stay, Stop
from tapedeck.queue import TrackQueue
from tapedeck.repeat import RepeatCycle
from tapedeck.shuffle import ShuffleSampler
from tapedeck.sleep_timer import Countdown, SleepTimer


class PlaybackOrchestrator:
    """Single owner of playback state.

    All mutations run under one reentrant lock: user actions, engine events
    (delivered from the engine's thread) and sleep timer ticks (delivered from
    the countdown thread) are applied one at a time.
    """

    def __init__(
        self,
        engine=None,
        history_limit: int = HISTORY_LIMIT,
        sleep_options=SLEEP_OPTIONS,
        fade_window: int = FADE_WINDOW_SECONDS,
        tick_interval: float = TICK_INTERVAL,
        default_volume: float = DEFAULT_VOLUME,
        rng: random.Random | None = None,
    ):
        self.engine = engine or NullEngine()
        self.queue = TrackQueue()
        self.sampler = ShuffleSampler(0, history_limit=history_limit, rng=rng)
        self.repeat = RepeatCycle()
        self.navigator = Navigator(self.queue, self.sampler, self.repeat)
        self.sleep_timer = SleepTimer(sleep_options, fade_window=fade_window)
        self.countdown = Countdown(self._on_countdown_tick, interval=tick_interval)

        self._current_track: Track | None = None
        self._attached_locator: str | None = None
        self.playback_state = PlaybackState.STOPPED
        self.volume = default_volume
        self.is_muted = False
        self.position = 0.0
        self.duration = 0.0
        self.restart_count = 0
        self.closed = False

        # Listener hooks, called synchronously after the state change
        self.track_change_listener = None  # (track, restarted) -> None
        self.state_change_listener = None  # (orchestrator) -> None
        self.load_error_listener = None  # (track, reason) -> None

        self._lock = threading.RLock()
        self.engine.bind(self)
        self.engine.set_volume(self.effective_volume)

    # Accessors

    @property
    def current_track(self) -> Track | None:
        return self._current_track

    @property
    def current_index(self) -> int | None:
        return self.queue.current_index

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self.queue.tracks

    @property
    def is_playing(self) -> bool:
        return self.playback_state is PlaybackState.PLAYING

    @property
    def repeat_mode(self) -> RepeatMode:
        return self.repeat.mode

    @property
    def shuffle_enabled(self) -> bool:
        return self.navigator.shuffle_enabled

    @property
    def history(self) -> list[int]:
        return self.sampler.history.as_list()

    @property
    def sleep_state(self) -> SleepTimerState:
        return self.sleep_timer.state

    @property
    def effective_volume(self) -> float:
        """Volume sent to the engine: muted, fading, or the user's volume."""
        if self.is_muted:
            return 0.0
        return self.sleep_timer.effective_volume(self.volume)

    @property
    def has_next(self) -> bool:
        return self.navigator.has_next()

    @property
    def has_previous(self) -> bool:
        return self.navigator.has_previous()

    def _track_display(self, track: Track | None = None) -> str:
        track = track or self._current_track
        return track.title if track else "No track"

    # Queue

    def set_queue(self, tracks: list[Track]) -> None:
        """Replace the active queue.

        Shuffle bag, history and the cycle flag are discarded together with the
        old queue. The selected track keeps its selection if it is in the new
        list; otherwise navigation is disabled until the next play_track.
        """
        with self._lock, start_action(player_logger, "set_queue"):
            self.countdown.pause()
            old_index = self.queue.current_index
            self.queue.replace(list(tracks), current=self._current_track)
            self.sampler.reset(len(self.queue))

            log_player_action(
                "set_queue",
                trigger_source="inventory",
                count=len(self.queue),
                old_index=old_index,
                new_index=self.queue.current_index,
                description=f"Queue replaced ({len(self.queue)} tracks)",
            )
            self._sync_countdown()
            self._notify_state()

    # Transport

    def play_track(self, track: Track) -> None:
        """Play a specific track, located in the queue by id."""
        with self._lock, start_action(player_logger, "play_track"):
            self.sampler.record(self.queue.current_index)
            index = self.queue.index_of(track)
            self.queue.select(index)

            log_player_action(
                "play_track",
                trigger_source="gui",
                track=track.title,
                index=index,
                description=f"Play selected: {track.title}"
                + ("" if index is not None else " (not in queue, navigation disabled)"),
            )
            self._load(track)
            self._set_state(PlaybackState.PLAYING)

    def toggle_play_pause(self) -> None:
        """Toggle play/pause; with nothing selected, start the first track in the queue."""
        with self._lock, start_action(player_logger, "play_pause"):
            if self._current_track is None:
                first = self.queue.get(0)
                if first is None:
                    log_player_action("play_pause_no_queue", trigger_source="gui", reason="queue_empty")
                    return
                self.play_track(first)
                return

            new_state = PlaybackState.PAUSED if self.is_playing else PlaybackState.PLAYING
            log_player_action(
                "play_pause_pressed",
                trigger_source="gui",
                old_state=self.playback_state.value,
                new_state=new_state.value,
                track=self._track_display(),
                description=f"{'Pausing' if self.is_playing else 'Resuming'}: {self._track_display()}",
            )
            self._set_state(new_state)

    def stop(self, reason: str = "user_initiated") -> None:
        with self._lock, start_action(player_logger, "stop_playback"):
            log_player_action(
                "stop_playback",
                trigger_source="gui" if reason == "user_initiated" else "automatic",
                stop_reason=reason,
                track=self._track_display(),
                description=f"Playback stopped: {reason.replace('_', ' ')}",
            )
            self._set_state(PlaybackState.STOPPED)

    def clear_current(self) -> None:
        """Drop the current selection and detach the engine."""
        with self._lock, start_action(player_logger, "clear_current"):
            self.queue.select(None)
            self._current_track = None
            self._attached_locator = None
            self.engine.detach()
            self.position = 0.0
            self.duration = 0.0
            self._set_state(PlaybackState.STOPPED)
            self._notify_track_change(None, restarted=False)

    def seek(self, seconds: float) -> None:
        with self._lock:
            if self._current_track is None:
                return
            log_player_action("seek", trigger_source="gui", old_position=self.position, new_position=seconds)
            self.engine.seek(seconds)
            self.position = max(0.0, seconds)

    # Navigation

    def next(self) -> None:
        """Manual next. Running off the end of a non-repeating queue is a no-op."""
        with self._lock, start_action(player_logger, "next_song"):
            self._commit(self.navigator.next(manual=True), trigger_source="gui", action="next")

    def auto_advance(self) -> None:
        """Advance after the current track finished playing."""
        with self._lock, start_action(player_logger, "auto_advance"):
            self._commit(self.navigator.next(manual=False), trigger_source="automatic", action="auto_advance")

    def previous(self) -> None:
        with self._lock, start_action(player_logger, "previous_song"):
            # Shuffle-mode previous replays history; pushing here would undo the pop
            record = not self.navigator.shuffle_enabled
            self._commit(self.navigator.previous(), trigger_source="gui", action="previous", record_history=record)

    def _commit(self, decision, trigger_source: str, action: str, record_history: bool = True) -> None:
        old_index = self.queue.current_index

        if isinstance(decision, Stay):
            log_player_action(
                f"{action}_ignored",
                trigger_source=trigger_source,
                reason=decision.reason,
                current_index=old_index,
                description=f"{action.replace('_', ' ').capitalize()} ignored ({decision.reason.replace('_', ' ')})",
            )
            return

        if isinstance(decision, Stop):
            log_player_action(f"{action}_stopped", trigger_source=trigger_source, reason=decision.reason)
            self.stop(decision.reason)
            return

        if isinstance(decision, Restart):
            log_player_action(
                f"{action}_repeat_one",
                trigger_source=trigger_source,
                track=self._track_display(),
                description=f"Repeating: {self._track_display()}",
            )
            self._restart()
            self._set_state(PlaybackState.PLAYING)
            return

        if isinstance(decision, Move):
            if record_history:
                self.sampler.record(old_index)
            self.queue.select(decision.index)
            track = self.queue.current_track

            log_player_action(
                f"{action}_track_selected",
                trigger_source=trigger_source,
                old_index=old_index,
                new_index=decision.index,
                track=track.title,
                description=f"Playing {action.replace('_', ' ')}: {track.title}",
            )
            self._load(track)
            self._set_state(PlaybackState.PLAYING)

    # Modes

    def toggle_repeat(self) -> RepeatMode:
        with self._lock, start_action(player_logger, "toggle_repeat"):
            old_mode = self.repeat.mode
            new_mode = self.repeat.toggle()
            log_player_action(
                "toggle_repeat",
                trigger_source="gui",
                old_state=old_mode.value,
                new_state=new_mode.value,
                description=f"Repeat mode: {new_mode.value}",
            )
            self._notify_state()
            return new_mode

    def toggle_shuffle(self) -> bool:
        """Toggle shuffle; the bag and history start fresh either way."""
        with self._lock, start_action(player_logger, "toggle_shuffle"):
            old_state = self.navigator.shuffle_enabled
            self.navigator.shuffle_enabled = not old_state
            self.sampler.reset(len(self.queue))
            log_player_action(
                "toggle_shuffle",
                trigger_source="gui",
                old_state=old_state,
                new_state=not old_state,
                description=f"Shuffle mode {'enabled' if not old_state else 'disabled'}",
            )
            self._notify_state()
            return self.navigator.shuffle_enabled

    # Volume

    def set_volume(self, volume: float) -> None:
        """Set the user's volume (0.0-1.0, clamped).

        While the sleep timer is fading the ramp keeps overriding the output;
        expiry and cancel restore the volume captured when the timer was armed.
        """
        if isinstance(volume, bool) or not isinstance(volume, numbers.Real):
            raise ValueError(f"volume must be a number, got {volume!r}")

        with self._lock:
            new_volume = max(0.0, min(1.0, float(volume)))
            log_player_action("volume_change", trigger_source="gui", old_state=self.volume, new_state=new_volume)
            self.volume = new_volume
            self._apply_volume()
            self._notify_state()

    def toggle_mute(self) -> bool:
        with self._lock:
            self.is_muted = not self.is_muted
            log_player_action(
                "toggle_mute",
                trigger_source="gui",
                old_state=not self.is_muted,
                new_state=self.is_muted,
                description="Muted" if self.is_muted else "Unmuted",
            )
            self._apply_volume()
            self._notify_state()
            return self.is_muted

    def _apply_volume(self) -> None:
        self.engine.set_volume(self.effective_volume)

    # Sleep timer

    def toggle_sleep_timer(self) -> SleepTimerState:
        """Cycle the sleep timer through its durations (0 disables it)."""
        with self._lock, start_action(player_logger, "toggle_sleep_timer"):
            self.countdown.cancel()
            restore = self.sleep_timer.toggle(self.volume)
            self._after_timer_change(restore)
            return self.sleep_timer.state

    def disable_sleep_timer(self) -> None:
        with self._lock, start_action(player_logger, "disable_sleep_timer"):
            self.countdown.cancel()
            restore = self.sleep_timer.cancel()
            self._after_timer_change(restore)

    def _after_timer_change(self, restore: float | None) -> None:
        if restore is not None:
            self.volume = restore
        state = self.sleep_timer.state
        log_player_action(
            "sleep_timer",
            trigger_source="gui",
            minutes=state.selected_minutes,
            description=f"Sleep timer: {state.selected_minutes} min" if state.armed else "Sleep timer off",
        )
        self._apply_volume()
        self._sync_countdown()
        self._notify_state()

    def tick(self) -> None:
        """Count one second of the sleep timer against active playback."""
        with self._lock:
            result = self.sleep_timer.tick(self.is_playing)
            if result.expired:
                if result.restore_volume is not None:
                    self.volume = result.restore_volume
                self.stop("sleep_timer")
                self._apply_volume()
                self._notify_state()
            elif result.fading:
                self._apply_volume()

    def _on_countdown_tick(self, generation: int) -> None:
        with self._lock:
            # A tick already in flight when its countdown was replaced
            if not self.countdown.is_current(generation):
                return
            self.tick()

    def _sync_countdown(self) -> None:
        """Run the countdown only while an armed timer has playing time to count.

        Stopping pauses the loop, so the part of a second already played is
        carried into the next start.
        """
        should_run = self.sleep_timer.armed and self.is_playing and not self.closed
        if should_run and not self.countdown.active:
            self.countdown.start()
        elif not should_run and self.countdown.active:
            self.countdown.pause()

    # Engine events

    def on_time_updated(self, seconds: float) -> None:
        with self._lock:
            self.position = seconds

    def on_duration_known(self, seconds: float) -> None:
        with self._lock:
            self.duration = seconds

    def on_ended(self) -> None:
        with self._lock:
            if not self.is_playing:
                log_player_action(
                    "track_end_ignored",
                    trigger_source="engine",
                    reason="not_playing",
                    description="Track end event ignored because player is not in playing state",
                )
                return
            self.auto_advance()

    def on_load_error(self, reason: str) -> None:
        """Report a load failure; the selection stays so the user can retry or skip."""
        with self._lock:
            self._report_load_error(reason)

    def _report_load_error(self, reason: str) -> None:
        log_error(player_logger, EngineError(reason), track=self._track_display())
        if callable(self.load_error_listener):
            self.load_error_listener(self._current_track, reason)

    # Internals

    def _load(self, track: Track) -> None:
        """Make ``track`` current, attaching the engine when its locator changes."""
        self._current_track = track
        if track.url == self._attached_locator:
            self._restart()
            return

        self.position = 0.0
        self.duration = 0.0
        try:
            self.engine.attach(track.url)
        except EngineError as e:
            self._attached_locator = None
            self._report_load_error(str(e))
        else:
            self._attached_locator = track.url
            # Engine state does not survive a locator change
            self._apply_volume()
        self._notify_track_change(track, restarted=False)

    def _restart(self) -> None:
        self.restart_count += 1
        self.position = 0.0
        self.engine.restart()
        self._notify_track_change(self._current_track, restarted=True)

    def _set_state(self, state: PlaybackState) -> None:
        self.playback_state = state
        if state is PlaybackState.PLAYING:
            self.engine.play()
        elif state is PlaybackState.PAUSED:
            self.engine.pause()
        else:
            self.engine.stop()
        self._sync_countdown()
        self._notify_state()

    def _notify_track_change(self, track: Track | None, restarted: bool) -> None:
        if callable(self.track_change_listener):
            self.track_change_listener(track, restarted)

    def _notify_state(self) -> None:
        if callable(self.state_change_listener):
            self.state_change_listener(self)

    def close(self) -> None:
        """Tear down: stop the countdown before anything else, then release the engine."""
        with self._lock, start_action(player_logger, "close"):
            self.closed = True
            self.countdown.cancel()
            self.engine.detach()
            self._attached_locator = None
            self.playback_state = PlaybackState.STOPPED
