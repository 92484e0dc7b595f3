from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import Any

from timeblocks.errors import ValidationError


class TimeBlockType(StrEnum):
    WORK = "WORK"
    PERSONAL = "PERSONAL"
    BREAK = "BREAK"
    FOCUS = "FOCUS"
    MEETING = "MEETING"
    EXERCISE = "EXERCISE"
    LEARNING = "LEARNING"
    CUSTOM = "CUSTOM"  # extra type information goes in metadata


@dataclass(frozen=True)
class TimeBlock:
    """One scheduled interval on the calendar.

    Blocks are validated on construction and never mutated afterwards; use
    ``copy`` or ``with_updated_time`` to derive a changed value. ``color`` is
    an ARGB hint for the UI and ``metadata`` is a free-form bag that the core
    never interprets (and never snapshots).
    """

    id: str
    start_time: datetime
    end_time: datetime
    title: str = ""
    description: str = ""
    block_type: TimeBlockType = TimeBlockType.CUSTOM
    color: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("TimeBlock id cannot be blank.")
        if not self.end_time > self.start_time:
            raise ValidationError(
                f"TimeBlock end_time ({self.end_time.isoformat()}) must be after "
                f"start_time ({self.start_time.isoformat()})."
            )
        object.__setattr__(self, "metadata", dict(self.metadata))

    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def duration_in_minutes(self) -> int:
        return int(self.duration().total_seconds() // 60)

    def duration_in_hours(self) -> float:
        return self.duration_in_minutes() / 60.0

    def overlaps_with(self, other: TimeBlock) -> bool:
        # Half-open intervals: a block ending at 10:00 does not touch one starting at 10:00.
        return self.start_time < other.end_time and other.start_time < self.end_time

    def copy(self, **overrides: Any) -> TimeBlock:
        return replace(self, **overrides)

    def with_updated_time(self, new_start_time: datetime, new_end_time: datetime) -> TimeBlock:
        if not new_end_time > new_start_time:
            raise ValidationError("new end_time must be after new start_time.")
        return replace(self, start_time=new_start_time, end_time=new_end_time)

    def start_date(self) -> date:
        return self.start_time.date()

    def end_date(self) -> date:
        return self.end_time.date()

    def is_multi_day(self) -> bool:
        return self.start_date() != self.end_date()
