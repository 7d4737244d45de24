"""Streaming engine boundary.

The orchestrator drives an engine through the ``StreamingEngine`` protocol and
receives its events through an ``EngineEvents`` sink. ``tapedeck.vlc_engine``
renders HLS/HTTP locators with libvlc; ``NullEngine`` is a silent stand-in for
headless sessions.
"""

from typing import Protocol


class EngineEvents(Protocol):
    """Receiver for events emitted by a streaming engine."""

    def on_time_updated(self, seconds: float) -> None: ...

    def on_duration_known(self, seconds: float) -> None: ...

    def on_ended(self) -> None: ...

    def on_load_error(self, reason: str) -> None: ...


class StreamingEngine(Protocol):
    """Transport controls for the track currently attached.

    ``attach`` raises ``EngineError`` when a locator cannot be loaded at all;
    failures discovered later are reported through ``EngineEvents.on_load_error``.
    """

    def bind(self, events: EngineEvents) -> None: ...

    def attach(self, locator: str) -> None: ...

    def detach(self) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def stop(self) -> None: ...

    def restart(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def set_volume(self, volume: float) -> None: ...


class NullEngine:
    """Engine that renders nothing and never emits events."""

    def bind(self, events):
        pass

    def attach(self, locator):
        pass

    def detach(self):
        pass

    def play(self):
        pass

    def pause(self):
        pass

    def stop(self):
        pass

    def restart(self):
        pass

    def seek(self, seconds):
        pass

    def set_volume(self, volume):
        pass
