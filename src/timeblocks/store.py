from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime
import logging

from timeblocks.errors import InvalidRangeError
from timeblocks.models import TimeBlock

logger = logging.getLogger(__name__)

VersionListener = Callable[[int], None]


def _by_start_time(block: TimeBlock) -> datetime:
    return block.start_time


class TimeBlockStore:
    """In-memory collection of time blocks indexed by their start date.

    A block is anchored only under ``block.start_date()``, so a multi-day
    block shows up in a point query on its first day only. At most one block
    per id exists in the store; adding a block whose id is already present
    replaces the earlier one wherever it was anchored.

    Every logical mutation bumps ``version`` exactly once (a batch add counts
    as one mutation) and then notifies subscribers with the new version.
    Consumers re-query after seeing the version move; no deltas are delivered.

    The store is meant for a single owner mutating it from one thread, such
    as a UI event loop. It does no locking.
    """

    def __init__(self) -> None:
        self._blocks_by_date: dict[date, list[TimeBlock]] = {}
        self._anchor_by_id: dict[str, date] = {}
        self._version = 0
        self._listeners: list[VersionListener] = []

    @classmethod
    def create(cls, initial_blocks: Iterable[TimeBlock] | None = None) -> TimeBlockStore:
        store = cls()
        if initial_blocks is not None:
            store.add_blocks(initial_blocks)
        return store

    @property
    def version(self) -> int:
        return self._version

    def subscribe(self, listener: VersionListener) -> Callable[[], None]:
        """Register ``listener(version)`` to run after each mutation; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Queries

    def get_all_blocks(self) -> list[TimeBlock]:
        return sorted(
            (block for blocks in self._blocks_by_date.values() for block in blocks),
            key=_by_start_time,
        )

    def get_blocks_for_date(self, day: date) -> list[TimeBlock]:
        return sorted(self._blocks_by_date.get(day, ()), key=_by_start_time)

    def get_blocks_in_range(self, start_date: date, end_date: date) -> list[TimeBlock]:
        """Blocks anchored inside ``[start_date, end_date]``, sorted by start time.

        Inclusion uses day granularity (``end_date() >= start_date`` and
        ``start_date() <= end_date``), so it can include a block whose
        time-of-day never reaches into the range.
        """
        if start_date > end_date:
            raise InvalidRangeError(
                f"start_date ({start_date.isoformat()}) must not be after end_date ({end_date.isoformat()})."
            )

        result: list[TimeBlock] = []
        seen_ids: set[str] = set()
        for anchor in sorted(day for day in self._blocks_by_date if start_date <= day <= end_date):
            for block in self._blocks_by_date[anchor]:
                if block.end_date() < start_date or block.start_date() > end_date:
                    continue
                if block.id in seen_ids:
                    continue
                seen_ids.add(block.id)
                result.append(block)

        return sorted(result, key=_by_start_time)

    def get_block_by_id(self, block_id: str) -> TimeBlock | None:
        anchor = self._anchor_by_id.get(block_id)
        if anchor is None:
            return None
        for block in self._blocks_by_date[anchor]:
            if block.id == block_id:
                return block
        return None

    def contains_block(self, block_id: str) -> bool:
        return block_id in self._anchor_by_id

    def size(self) -> int:
        return len(self._anchor_by_id)

    def is_empty(self) -> bool:
        return self.size() == 0

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, block_id: object) -> bool:
        return isinstance(block_id, str) and self.contains_block(block_id)

    # Mutations

    def add_block(self, block: TimeBlock) -> None:
        self._remove_by_id(block.id)
        self._insert(block)
        self._bump_version()
        logger.debug(
            "time_block_added id=%s date=%s version=%s",
            block.id,
            block.start_date().isoformat(),
            self._version,
        )

    def add_blocks(self, blocks: Iterable[TimeBlock]) -> None:
        batch = list(blocks)
        for block in batch:
            if not isinstance(block, TimeBlock):
                raise TypeError(f"add_blocks expects TimeBlock values, got {type(block).__name__}.")

        for block in batch:
            self._remove_by_id(block.id)
            self._insert(block)
        self._bump_version()
        logger.debug("time_blocks_added count=%s version=%s", len(batch), self._version)

    def update_block(self, block: TimeBlock) -> bool:
        if not self._remove_by_id(block.id):
            logger.debug("time_block_update_skipped id=%s reason=not_found", block.id)
            return False

        self._insert(block)
        self._bump_version()
        logger.debug(
            "time_block_updated id=%s date=%s version=%s",
            block.id,
            block.start_date().isoformat(),
            self._version,
        )
        return True

    def remove_block(self, block: TimeBlock | str) -> bool:
        block_id = block.id if isinstance(block, TimeBlock) else block
        if not self._remove_by_id(block_id):
            logger.debug("time_block_remove_skipped id=%s reason=not_found", block_id)
            return False

        self._bump_version()
        logger.debug("time_block_removed id=%s version=%s", block_id, self._version)
        return True

    def remove_blocks_for_date(self, day: date) -> int:
        removed_blocks = self._blocks_by_date.pop(day, [])
        for block in removed_blocks:
            del self._anchor_by_id[block.id]

        removed = len(removed_blocks)
        if removed > 0:
            self._bump_version()
            logger.debug(
                "time_blocks_removed_for_date date=%s count=%s version=%s",
                day.isoformat(),
                removed,
                self._version,
            )
        return removed

    def clear(self) -> None:
        self._blocks_by_date.clear()
        self._anchor_by_id.clear()
        self._bump_version()
        logger.debug("time_block_store_cleared version=%s", self._version)

    def _insert(self, block: TimeBlock) -> None:
        anchor = block.start_date()
        self._blocks_by_date.setdefault(anchor, []).append(block)
        self._anchor_by_id[block.id] = anchor

    def _remove_by_id(self, block_id: str) -> bool:
        anchor = self._anchor_by_id.pop(block_id, None)
        if anchor is None:
            return False

        remaining = [block for block in self._blocks_by_date[anchor] if block.id != block_id]
        if remaining:
            self._blocks_by_date[anchor] = remaining
        else:
            del self._blocks_by_date[anchor]
        return True

    def _bump_version(self) -> None:
        self._version += 1
        for listener in list(self._listeners):
            listener(self._version)

    def __repr__(self) -> str:
        return f"TimeBlockStore(dates={len(self._blocks_by_date)}, blocks={self.size()}, version={self._version})"
