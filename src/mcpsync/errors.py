"""Error types raised by mcpsync.

Every failure of a sync pass is one of these, so the pass boundary can turn
any of them into a single user-visible notification.
"""

from __future__ import annotations


class MCPSyncError(Exception):
    """Base class for mcpsync errors."""
    pass


class FetchError(MCPSyncError):
    """The remote tool catalog could not be fetched."""
    pass


class DecodeError(MCPSyncError):
    """The remote tool catalog is not valid JSON or has the wrong shape."""
    pass


class StorageReadError(MCPSyncError):
    """Stored plugins could not be read or parsed."""
    pass


class StorageWriteError(MCPSyncError):
    """Plugins could not be written to the store."""
    pass


class InvocationError(MCPSyncError):
    """A bridge tool call returned a failure status."""

    def __init__(self, status_text: str, status_code: int = 0):
        self.status_text = status_text
        self.status_code = status_code
        super().__init__(f"Request failed: {status_text}")
