"""Unit tests for configuration loading."""

import importlib
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import config


@pytest.fixture
def reload_config(monkeypatch):
    """Reload config with the given environment, restoring it afterwards."""

    def _reload(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(config)

    yield _reload
    monkeypatch.undo()
    importlib.reload(config)


class TestSleepOptions:
    @pytest.mark.parametrize(
        "options,expected",
        [
            ([0, 15, 30, 60, 120], (0, 15, 30, 60, 120)),
            ([15, 30], (0, 15, 30)),
            ([0, 30, 30, -5, 60], (0, 30, 60)),
            ([], (0,)),
            ([90, 5], (0, 90, 5)),
        ],
    )
    def test_validate_sleep_options(self, options, expected):
        assert config._validate_sleep_options(options) == expected

    def test_env_override(self, reload_config):
        module = reload_config(TAPEDECK_SLEEP_OPTIONS="5,10")
        assert module.SLEEP_OPTIONS == (0, 5, 10)


class TestVolume:
    @pytest.mark.parametrize("value,expected", [(-1.0, 0.0), (0.3, 0.3), (2.0, 1.0)])
    def test_clamp_volume(self, value, expected):
        assert config._clamp_volume(value) == expected

    def test_env_default_volume_is_clamped(self, reload_config):
        module = reload_config(TAPEDECK_DEFAULT_VOLUME="1.5")
        assert module.DEFAULT_VOLUME == 1.0


class TestOverrides:
    def test_history_limit(self, reload_config):
        assert reload_config(TAPEDECK_HISTORY_LIMIT="10").HISTORY_LIMIT == 10

    def test_inventory_settings(self, reload_config):
        module = reload_config(TAPEDECK_INVENTORY_URL="http://music.local", TAPEDECK_INVENTORY_TIMEOUT="3")
        assert module.INVENTORY_URL == "http://music.local"
        assert module.INVENTORY_TIMEOUT == 3.0

    def test_download_timeout_separate_from_request_timeout(self, reload_config):
        module = reload_config(TAPEDECK_INVENTORY_TIMEOUT="3", TAPEDECK_INVENTORY_DOWNLOAD_TIMEOUT="1200")
        assert module.INVENTORY_TIMEOUT == 3.0
        assert module.INVENTORY_DOWNLOAD_TIMEOUT == 1200.0


def test_version_read_from_pyproject():
    assert config.__version__ != "unknown"
