from tests.mocks.engine_mock import RecordingEngine
from tests.mocks.vlc_mock import (
    MockEventManager,
    MockEventType,
    MockInstance,
    MockMedia,
    MockMediaPlayer,
)

__all__ = [
    'MockEventManager',
    'MockEventType',
    'MockInstance',
    'MockMedia',
    'MockMediaPlayer',
    'RecordingEngine',
]
