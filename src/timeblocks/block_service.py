from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import timedelta

from timeblocks.models import TimeBlock, TimeBlockType


def has_overlaps(blocks: Sequence[TimeBlock]) -> bool:
    for index, block in enumerate(blocks):
        for other in blocks[index + 1 :]:
            if block.overlaps_with(other):
                return True
    return False


def find_overlaps(blocks: Sequence[TimeBlock]) -> list[tuple[TimeBlock, TimeBlock]]:
    """Return every overlapping pair, in the order the blocks were given."""
    overlaps: list[tuple[TimeBlock, TimeBlock]] = []
    for index, block in enumerate(blocks):
        for other in blocks[index + 1 :]:
            if block.overlaps_with(other):
                overlaps.append((block, other))
    return overlaps


def sorted_by_start_time(blocks: Iterable[TimeBlock]) -> list[TimeBlock]:
    return sorted(blocks, key=lambda block: block.start_time)


def filter_by_type(blocks: Iterable[TimeBlock], block_type: TimeBlockType) -> list[TimeBlock]:
    return [block for block in blocks if block.block_type == block_type]


def filter_by_types(blocks: Iterable[TimeBlock], block_types: set[TimeBlockType]) -> list[TimeBlock]:
    return [block for block in blocks if block.block_type in block_types]


def total_duration(blocks: Iterable[TimeBlock]) -> timedelta:
    return sum((block.duration() for block in blocks), timedelta(0))


def find_by_id(blocks: Iterable[TimeBlock], block_id: str) -> TimeBlock | None:
    for block in blocks:
        if block.id == block_id:
            return block
    return None
