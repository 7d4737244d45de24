"""Exceptions raised at the edges of tapedeck.

The orchestrator itself never raises for navigation or selection; these cover
the inventory service and streaming engine boundaries.
"""


class TapedeckError(Exception):
    """Base class for tapedeck errors."""


class InventoryError(TapedeckError):
    """An inventory service request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ReadOnlyInventoryError(InventoryError):
    """A write was attempted against a read-only inventory service."""


class DuplicateTrackError(InventoryError):
    """The inventory service already holds the requested track."""


class EngineError(TapedeckError):
    """The streaming engine could not load a locator."""
