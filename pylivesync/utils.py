"""Utility functions and constants for PyLiveSync."""

from typing import Optional

# =============================================================================
# Constants for synchronization
# =============================================================================

# Default poll interval of a sync unit (seconds)
DEFAULT_UPDATE_INTERVAL: int = 5

# Delay before the first tick (milliseconds)
INITIAL_DELAY_MS: int = 5000

# Tick interval used when no synchronizer is configured (milliseconds)
DEFAULT_TICK_INTERVAL_MS: int = 5000

# Extensions synchronized when a unit does not list its own
DEFAULT_EXTENSIONS: tuple[str, ...] = (".html", ".css", ".js", ".xhtml")

# Archive suffixes removed to get the exploded application path
ARCHIVE_SUFFIXES: tuple[str, ...] = (".war", ".ear")


# =============================================================================
# Path utilities
# =============================================================================


def strip_archive_suffix(path: str) -> str:
    """Strip a trailing archive suffix from a deployed artifact path.

    Args:
        path: Absolute path of the deployed artifact

    Returns:
        The path without a trailing ``.war`` or ``.ear``, unchanged otherwise

    Examples:
        >>> strip_archive_suffix("/opt/tomee/webapps/app.war")
        '/opt/tomee/webapps/app'
        >>> strip_archive_suffix("/opt/tomee/webapps/app.ear")
        '/opt/tomee/webapps/app'
        >>> strip_archive_suffix("/opt/tomee/webapps/app")
        '/opt/tomee/webapps/app'
    """
    for suffix in ARCHIVE_SUFFIXES:
        if path.endswith(suffix):
            return path[: -len(suffix)]
    return path


def normalize_interval(value: Optional[int]) -> int:
    """Return a usable update interval in seconds.

    Unset, zero and negative values fall back to DEFAULT_UPDATE_INTERVAL.

    Examples:
        >>> normalize_interval(None)
        5
        >>> normalize_interval(-1)
        5
        >>> normalize_interval(12)
        12
    """
    if value is None or value <= 0:
        return DEFAULT_UPDATE_INTERVAL
    return int(value)

