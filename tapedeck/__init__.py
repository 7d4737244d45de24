"""tapedeck playback orchestration.

This package holds the playback core of the tapedeck player:
- queue: ordered track list with a current position
- shuffle: shuffle bag sampler and replay history
- repeat: repeat mode cycle
- navigation: next/previous decisions under shuffle and repeat
- sleep_timer: sleep countdown with volume fade
- orchestrator: the single state object the UI and streaming engine drive
- inventory: client for the remote track inventory service

The libvlc engine lives in ``tapedeck.vlc_engine`` and is imported on demand.
"""

from tapedeck.engine import EngineEvents, NullEngine, StreamingEngine
from tapedeck.errors import (
    DuplicateTrackError,
    EngineError,
    InventoryError,
    ReadOnlyInventoryError,
    TapedeckError,
)
from tapedeck.inventory import InventoryClient, filter_tracks
from tapedeck.models import PlaybackState, RepeatMode, SleepTimerState, Track
from tapedeck.orchestrator import PlaybackOrchestrator
from tapedeck.shuffle import EXHAUSTED, HistoryStack, ShuffleSampler

__all__ = [
    'DuplicateTrackError',
    'EXHAUSTED',
    'EngineError',
    'EngineEvents',
    'HistoryStack',
    'InventoryClient',
    'InventoryError',
    'NullEngine',
    'PlaybackOrchestrator',
    'PlaybackState',
    'ReadOnlyInventoryError',
    'RepeatMode',
    'ShuffleSampler',
    'SleepTimerState',
    'StreamingEngine',
    'TapedeckError',
    'Track',
    'filter_tracks',
]
