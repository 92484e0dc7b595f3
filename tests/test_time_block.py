from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from timeblocks.errors import ValidationError
from timeblocks.models import TimeBlock, TimeBlockType


def block(id: str, start: datetime, end: datetime, **kwargs) -> TimeBlock:
    return TimeBlock(id=id, start_time=start, end_time=end, **kwargs)


def at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    return datetime(2024, 1, day, hour, minute)


def test_valid_block_has_positive_duration() -> None:
    item = block("1", at(9), at(10, 30))

    assert item.duration() == timedelta(hours=1, minutes=30)
    assert item.duration_in_minutes() == 90
    assert item.duration_in_hours() == 1.5


def test_defaults_are_empty_and_custom() -> None:
    item = block("1", at(9), at(10))

    assert item.title == ""
    assert item.description == ""
    assert item.block_type == TimeBlockType.CUSTOM
    assert item.color is None
    assert item.metadata == {}


@pytest.mark.parametrize("bad_id", ["", "   ", "\t"])
def test_blank_id_is_rejected(bad_id: str) -> None:
    with pytest.raises(ValidationError, match="id cannot be blank"):
        block(bad_id, at(9), at(10))


@pytest.mark.parametrize(
    ("start", "end"),
    [
        (at(10), at(10)),
        (at(10), at(9)),
        (at(0, day=16), at(23, day=15)),
    ],
)
def test_end_not_after_start_is_rejected(start: datetime, end: datetime) -> None:
    with pytest.raises(ValidationError, match="must be after"):
        block("1", start, end)


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        block("1", at(10), at(10))


def test_overlap_is_symmetric() -> None:
    first = block("1", at(9), at(11))
    second = block("2", at(10), at(12))
    third = block("3", at(13), at(14))

    assert first.overlaps_with(second)
    assert second.overlaps_with(first)
    assert not first.overlaps_with(third)
    assert not third.overlaps_with(first)


def test_adjacent_blocks_do_not_overlap() -> None:
    first = block("1", at(9), at(10))
    second = block("2", at(10), at(11))

    assert not first.overlaps_with(second)
    assert not second.overlaps_with(first)


def test_contained_block_overlaps() -> None:
    outer = block("1", at(8), at(12))
    inner = block("2", at(9), at(10))

    assert outer.overlaps_with(inner)
    assert inner.overlaps_with(outer)


def test_with_updated_time_keeps_other_fields() -> None:
    original = block(
        "1",
        at(9),
        at(10),
        title="Planning",
        description="Sprint",
        block_type=TimeBlockType.MEETING,
        color=0xFF00FF00,
        metadata={"room": "A"},
    )

    moved = original.with_updated_time(at(14), at(15))

    assert moved.start_time == at(14)
    assert moved.end_time == at(15)
    assert moved.title == "Planning"
    assert moved.description == "Sprint"
    assert moved.block_type == TimeBlockType.MEETING
    assert moved.color == 0xFF00FF00
    assert moved.metadata == {"room": "A"}
    assert original.start_time == at(9)


def test_with_updated_time_rejects_invalid_bounds() -> None:
    original = block("1", at(9), at(10))

    with pytest.raises(ValidationError):
        original.with_updated_time(at(15), at(14))
    with pytest.raises(ValidationError):
        original.with_updated_time(at(15), at(15))


def test_copy_revalidates() -> None:
    original = block("1", at(9), at(10))

    assert original.copy(title="Renamed").title == "Renamed"
    with pytest.raises(ValidationError):
        original.copy(id=" ")
    with pytest.raises(ValidationError):
        original.copy(end_time=at(8))


def test_block_is_immutable() -> None:
    item = block("1", at(9), at(10))

    with pytest.raises(AttributeError):
        item.title = "Changed"  # type: ignore[misc]


def test_metadata_is_copied_on_construction() -> None:
    source = {"k": "v"}
    item = block("1", at(9), at(10), metadata=source)
    source["k"] = "changed"

    assert item.metadata == {"k": "v"}


def test_blocks_with_metadata_are_hashable() -> None:
    item = block("1", at(9), at(10), metadata={"k": ["v"]})

    assert hash(item) == hash(block("1", at(9), at(10), metadata={"other": 1}))


def test_day_projections() -> None:
    single = block("1", at(9), at(10))
    overnight = block("2", at(22), at(2, day=16))

    assert single.start_date() == single.end_date() == at(0).date()
    assert not single.is_multi_day()
    assert overnight.start_date() == at(0).date()
    assert overnight.end_date() == at(0, day=16).date()
    assert overnight.is_multi_day()
