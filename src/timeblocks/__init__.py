"""Date-indexed store of time blocks for calendar views."""

from timeblocks.errors import InvalidRangeError, TimeBlockError, ValidationError
from timeblocks.models import TimeBlock, TimeBlockType
from timeblocks.store import TimeBlockStore

__all__ = [
    "InvalidRangeError",
    "TimeBlock",
    "TimeBlockError",
    "TimeBlockStore",
    "TimeBlockType",
    "ValidationError",
]
