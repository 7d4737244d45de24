from decouple import Csv, config
from pathlib import Path


def get_version():
    """Get version from pyproject.toml"""
    import tomllib

    pyproject_path = Path(__file__).parent / "pyproject.toml"
    if pyproject_path.exists():
        with open(pyproject_path, 'rb') as f:
            data = tomllib.load(f)
            return data.get("project", {}).get("version", "unknown")
    return "unknown"


__version__ = get_version()

# App Configuration
APP_NAME = config('TAPEDECK_APP_NAME', default="tapedeck")


def _validate_sleep_options(options):
    """Normalize the sleep timer cycle.

    The cycle always starts at 0 (disabled); remaining entries are positive
    minute values kept in the order given, duplicates dropped.

    Args:
        options: Sequence of minute values read from the environment

    Returns:
        Tuple of minutes, e.g. (0, 15, 30, 60, 120)

    Examples:
        >>> _validate_sleep_options([15, 30])
        (0, 15, 30)
        >>> _validate_sleep_options([0, 30, 30, -5, 60])
        (0, 30, 60)
    """
    cycle = [0]
    for minutes in options:
        if minutes > 0 and minutes not in cycle:
            cycle.append(minutes)
    return tuple(cycle)


def _clamp_volume(value):
    """Clamp a configured volume into the 0.0-1.0 range."""
    return max(0.0, min(1.0, value))


# Playback Configuration
HISTORY_LIMIT = config('TAPEDECK_HISTORY_LIMIT', default=50, cast=int)
DEFAULT_VOLUME = _clamp_volume(config('TAPEDECK_DEFAULT_VOLUME', default=1.0, cast=float))

# Sleep Timer Configuration
SLEEP_OPTIONS = _validate_sleep_options(
    config('TAPEDECK_SLEEP_OPTIONS', default='0,15,30,60,120', cast=Csv(cast=int))
)
FADE_WINDOW_SECONDS = config('TAPEDECK_FADE_WINDOW', default=30, cast=int)
TICK_INTERVAL = config('TAPEDECK_TICK_INTERVAL', default=1.0, cast=float)  # seconds

# Inventory Service Configuration
INVENTORY_URL = config('TAPEDECK_INVENTORY_URL', default="http://127.0.0.1:8080")
INVENTORY_TIMEOUT = config('TAPEDECK_INVENTORY_TIMEOUT', default=10.0, cast=float)
# Adding a track blocks until the server has fetched and segmented it
INVENTORY_DOWNLOAD_TIMEOUT = config('TAPEDECK_INVENTORY_DOWNLOAD_TIMEOUT', default=900.0, cast=float)

# Logging Configuration
LOG_LEVEL = config('TAPEDECK_LOG_LEVEL', default="INFO")
LOG_FILE = config('TAPEDECK_LOG_FILE', default=None)
