"""libvlc-backed streaming engine."""

import vlc
from concurrent.futures import ThreadPoolExecutor
from tapedeck.engine import EngineEvents
from tapedeck.errors import EngineError
from tapedeck.logging import engine_logger, log_error, log_player_action, start_action


class VlcEngine:
    """Streaming engine backed by a libvlc media player.

    VLC invokes event callbacks on its own thread and must not be called back
    into from there, so events are handed to ``dispatch`` (a single worker
    thread by default) before reaching the sink.
    """

    def __init__(self, instance=None, dispatch=None):
        self.instance = instance or vlc.Instance()
        self.media_player = self.instance.media_player_new()
        self.events: EngineEvents | None = None
        self.locator: str | None = None
        self._executor = None
        if dispatch is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tapedeck-engine")
            dispatch = self._executor.submit
        self._dispatch = dispatch

        event_manager = self.media_player.event_manager()
        event_manager.event_attach(vlc.EventType.MediaPlayerEndReached, self._on_end_reached)
        event_manager.event_attach(vlc.EventType.MediaPlayerTimeChanged, self._on_time_changed)
        event_manager.event_attach(vlc.EventType.MediaPlayerLengthChanged, self._on_length_changed)
        event_manager.event_attach(vlc.EventType.MediaPlayerEncounteredError, self._on_error)

    def bind(self, events: EngineEvents) -> None:
        self.events = events

    def attach(self, locator: str) -> None:
        """Load a new locator. Position, duration and buffering state do not carry over."""
        with start_action(engine_logger, "engine_attach", locator=locator):
            try:
                media = self.instance.media_new(locator)
            except Exception as e:
                log_error(engine_logger, e, locator=locator)
                raise EngineError(f"Cannot load {locator}: {e}") from e
            if media is None:
                raise EngineError(f"Cannot load {locator}")

            self.media_player.stop()
            self.media_player.set_media(media)
            self.locator = locator

    def detach(self) -> None:
        self.media_player.stop()
        self.media_player.set_media(None)
        self.locator = None

    def play(self) -> None:
        if self.media_player.get_media() is not None:
            self.media_player.play()

    def pause(self) -> None:
        self.media_player.set_pause(1)

    def stop(self) -> None:
        self.media_player.stop()

    def restart(self) -> None:
        """Replay the attached locator from the start."""
        if self.media_player.get_media() is None:
            return
        self.media_player.stop()
        self.media_player.play()

    def seek(self, seconds: float) -> None:
        duration_ms = self.media_player.get_length()
        target_ms = max(0, int(seconds * 1000))
        if duration_ms > 0:
            target_ms = min(target_ms, duration_ms)
        self.media_player.set_time(target_ms)

    def set_volume(self, volume: float) -> None:
        """Set output volume from a 0.0-1.0 level (VLC takes 0-100)."""
        self.media_player.audio_set_volume(round(max(0.0, min(1.0, volume)) * 100))

    def close(self) -> None:
        self.detach()
        if self._executor is not None:
            self._executor.shutdown(wait=False)

    def _forward(self, handler_name: str, *args) -> None:
        if self.events is None:
            return
        self._dispatch(getattr(self.events, handler_name), *args)

    def _on_end_reached(self, event):
        log_player_action("engine_end_reached", trigger_source="engine", locator=self.locator)
        self._forward("on_ended")

    def _on_time_changed(self, event):
        self._forward("on_time_updated", event.u.new_time / 1000)

    def _on_length_changed(self, event):
        self._forward("on_duration_known", event.u.new_length / 1000)

    def _on_error(self, event):
        self._forward("on_load_error", f"VLC could not play {self.locator}")
