import pytest
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Hypothesis configuration for property-based testing
from hypothesis import settings
from tapedeck.orchestrator import PlaybackOrchestrator
from tests.helpers.tracks import make_tracks
from tests.mocks import RecordingEngine

# Register Hypothesis profiles
settings.register_profile("fast", max_examples=50, deadline=None)
settings.register_profile("thorough", max_examples=1000, deadline=None)
settings.load_profile("fast")  # Default to fast profile


def pytest_collection_modifyitems(items):
    """Automatically order tests: unit tests first, then property tests.

    Individual tests marked with @pytest.mark.order("last") will run at the very end.
    """
    for item in items:
        # Skip if item already has explicit order marker
        if hasattr(item, 'get_closest_marker') and item.get_closest_marker('order'):
            continue

        test_file = str(item.fspath)
        if 'test_unit_' in test_file:
            item.add_marker(pytest.mark.order(1))
        elif 'test_props_' in test_file:
            item.add_marker(pytest.mark.order(2))


@pytest.fixture
def tracks():
    """Five tracks in inventory order."""
    return make_tracks(5)


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def player(engine):
    """Orchestrator with a recording engine, deterministic shuffle and a slow countdown."""
    orchestrator = PlaybackOrchestrator(
        engine=engine,
        history_limit=50,
        sleep_options=(0, 15, 30, 60, 120),
        fade_window=30,
        tick_interval=3600,
        default_volume=1.0,
        rng=random.Random(1234),
    )
    yield orchestrator
    orchestrator.close()
