"""Exception hierarchy for lazyrfc.

Only failures that callers are expected to report to the user live here.
Programming errors and storage corruption propagate as their native types.
"""

from __future__ import annotations


class LazyRfcError(Exception):
    """Base class for user-reportable lazyrfc failures."""


class FetchError(LazyRfcError):
    """Raised when an RFC document cannot be retrieved."""

    def __init__(self, number: int, message: str) -> None:
        super().__init__(message)
        self.number = number


class IndexSyncError(LazyRfcError):
    """Raised when the RFC index cannot be downloaded or parsed."""


class SyncError(LazyRfcError):
    """Raised when bulk document sync via rsync fails."""
