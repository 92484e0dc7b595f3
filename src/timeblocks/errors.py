from __future__ import annotations


class TimeBlockError(Exception):
    """Base class for caller errors raised by the time block core."""


class ValidationError(TimeBlockError, ValueError):
    """Raised when a time block would violate its invariants."""


class InvalidRangeError(TimeBlockError, ValueError):
    """Raised when a date range starts after it ends."""
