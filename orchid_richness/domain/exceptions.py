"""
Pipeline error types.

Every error is fatal for a report run: there is no retry and no partial
result.
"""
from typing import Optional


class RichnessPipelineError(Exception):
    """Base class for errors raised while building the richness tables."""
    pass


class LoadError(RichnessPipelineError):
    """A source file is missing, unreadable or holds a malformed record."""

    def __init__(self, message: str, source: str = "", row: Optional[int] = None):
        self.message = message
        self.source = source
        self.row = row
        location = source
        if row is not None:
            location = f"{source} (row {row})"
        super().__init__(f"{location}: {message}" if location else message)


class CRSMismatchError(RichnessPipelineError):
    """A dataset cannot be resolved to the common geographic CRS."""
    pass
