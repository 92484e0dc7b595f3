from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from timeblocks.block_service import filter_by_type
from timeblocks.errors import InvalidRangeError
from timeblocks.models import TimeBlock, TimeBlockType
from timeblocks.store import TimeBlockStore


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive date range currently shown by the calendar grid."""

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise InvalidRangeError(
                f"start_date ({self.start_date.isoformat()}) must not be after "
                f"end_date ({self.end_date.isoformat()})."
            )


def visible_range_for_months(first_month: date, last_month: date) -> VisibleRange:
    """Span from the first day of ``first_month`` to the last day of ``last_month``.

    Only the year and month of each argument are used.
    """
    last_day = calendar.monthrange(last_month.year, last_month.month)[1]
    return VisibleRange(
        start_date=first_month.replace(day=1),
        end_date=last_month.replace(day=last_day),
    )


def blocks_for_date(store: TimeBlockStore, day: date) -> list[TimeBlock]:
    return store.get_blocks_for_date(day)


def blocks_in_range(store: TimeBlockStore, start_date: date, end_date: date) -> list[TimeBlock]:
    return store.get_blocks_in_range(start_date, end_date)


def visible_blocks(store: TimeBlockStore, visible_range: VisibleRange) -> list[TimeBlock]:
    return store.get_blocks_in_range(visible_range.start_date, visible_range.end_date)


def blocks_by_type(store: TimeBlockStore, day: date, block_type: TimeBlockType) -> list[TimeBlock]:
    return filter_by_type(store.get_blocks_for_date(day), block_type)


def has_blocks_on_date(store: TimeBlockStore, day: date) -> bool:
    return bool(store.get_blocks_for_date(day))


def block_count(store: TimeBlockStore, day: date) -> int:
    return len(store.get_blocks_for_date(day))
