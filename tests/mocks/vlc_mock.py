from types import SimpleNamespace


class MockEventType:
    """Mock VLC EventType enum."""

    MediaPlayerEndReached = 265
    MediaPlayerEncounteredError = 266
    MediaPlayerTimeChanged = 267
    MediaPlayerLengthChanged = 273


class MockEventManager:
    """Mock VLC EventManager for handling events."""

    def __init__(self):
        self.callbacks = {}

    def event_attach(self, event_type, callback):
        """Attach a callback to an event type."""
        self.callbacks[event_type] = callback

    def trigger_event(self, event_type, **payload):
        """Manually trigger an event (for testing).

        Keyword arguments become attributes of ``event.u``, e.g. ``new_time=1500``.
        """
        if event_type in self.callbacks:
            event = SimpleNamespace(type=event_type, u=SimpleNamespace(**payload))
            self.callbacks[event_type](event)


class MockMedia:
    """Mock VLC Media object for a locator (URL or path)."""

    def __init__(self, locator):
        self.locator = locator
        self._as_parameter_ = None


class MockMediaPlayer:
    """Mock VLC MediaPlayer for unit testing.

    Simulates VLC media player behavior without actual playback.
    Provides deterministic responses for time, duration, volume, etc.
    """

    def __init__(self):
        self._media = None
        self._is_playing = False
        self._time = 0  # Current position in milliseconds
        self._length = 180000  # Default 3 minutes in milliseconds
        self._volume = 100
        self._event_manager = MockEventManager()
        self.stop_count = 0
        self.play_count = 0

    def event_manager(self):
        """Return the event manager."""
        return self._event_manager

    def get_media(self):
        """Get the current media object."""
        return self._media

    def set_media(self, media):
        """Set the media to play."""
        self._media = media
        self._time = 0

    def play(self):
        """Start playback."""
        self._is_playing = True
        self.play_count += 1
        return 0  # VLC returns 0 on success

    def set_pause(self, do_pause):
        """Pause (1) or resume (0) playback."""
        self._is_playing = not do_pause

    def stop(self):
        """Stop playback."""
        self._is_playing = False
        self._time = 0
        self.stop_count += 1

    def get_time(self):
        """Get current playback time in milliseconds."""
        return self._time

    def set_time(self, time_ms):
        """Set playback position in milliseconds."""
        self._time = max(0, min(time_ms, self._length))

    def get_length(self):
        """Get media duration in milliseconds."""
        if self._media is None:
            return 0
        return self._length

    def audio_get_volume(self):
        """Get volume (0-100)."""
        return self._volume

    def audio_set_volume(self, volume):
        """Set volume (0-100)."""
        self._volume = max(0, min(100, volume))
        return 0  # VLC returns 0 on success

    def is_playing(self):
        """Check if currently playing."""
        return self._is_playing


class MockInstance:
    """Mock VLC Instance for creating media players and media objects."""

    def __init__(self, *args, **kwargs):
        """Initialize mock VLC instance."""
        self._media_player = None

    def media_player_new(self):
        """Create a new media player."""
        self._media_player = MockMediaPlayer()
        return self._media_player

    def media_new(self, locator):
        """Create a new media object from a locator."""
        return MockMedia(locator)
