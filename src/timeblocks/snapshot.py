from __future__ import annotations

from collections.abc import Iterable
import json
import logging
from pathlib import Path

from pydantic import ValidationError as RecordValidationError
from sqlmodel import SQLModel

from timeblocks.models import TimeBlock, TimeBlockType
from timeblocks.store import TimeBlockStore
from timeblocks.timeutil import dt_to_str, str_to_dt

logger = logging.getLogger(__name__)


class SnapshotError(RuntimeError):
    """Raised when a snapshot file cannot be read back into a store."""


class TimeBlockRecord(SQLModel):
    """Serializable form of a TimeBlock.

    ``metadata`` has no counterpart here: arbitrary values are not guaranteed
    to round-trip, so it is dropped on export and comes back empty.
    """

    id: str
    start_dt: str
    end_dt: str
    title: str = ""
    description: str = ""
    block_type: TimeBlockType = TimeBlockType.CUSTOM
    color: int | None = None


def export_blocks(store: TimeBlockStore) -> list[TimeBlock]:
    return store.get_all_blocks()


def import_blocks(blocks: Iterable[TimeBlock]) -> TimeBlockStore:
    return TimeBlockStore.create(blocks)


def to_record(block: TimeBlock) -> TimeBlockRecord:
    return TimeBlockRecord(
        id=block.id,
        start_dt=dt_to_str(block.start_time),
        end_dt=dt_to_str(block.end_time),
        title=block.title,
        description=block.description,
        block_type=block.block_type,
        color=block.color,
    )


def to_block(record: TimeBlockRecord) -> TimeBlock:
    return TimeBlock(
        id=record.id,
        start_time=str_to_dt(record.start_dt),
        end_time=str_to_dt(record.end_dt),
        title=record.title,
        description=record.description,
        block_type=record.block_type,
        color=record.color,
    )


def to_records(store: TimeBlockStore) -> list[TimeBlockRecord]:
    return [to_record(block) for block in export_blocks(store)]


def from_records(records: Iterable[TimeBlockRecord]) -> TimeBlockStore:
    return import_blocks(to_block(record) for record in records)


def dump_snapshot(store: TimeBlockStore, path: Path) -> None:
    payload = [record.model_dump(mode="json") for record in to_records(store)]
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.tmp")
    tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    tmp_path.replace(path)
    logger.info("snapshot_dumped path=%s blocks=%s", path, len(payload))


def load_snapshot(path: Path) -> TimeBlockStore:
    if not path.exists():
        logger.info("snapshot_missing path=%s", path)
        return TimeBlockStore.create()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot {path} is not valid JSON.") from exc
    if not isinstance(payload, list):
        raise SnapshotError(f"Snapshot {path} must contain a JSON array of blocks.")

    try:
        store = from_records(TimeBlockRecord.model_validate(item) for item in payload)
    except (RecordValidationError, ValueError) as exc:
        raise SnapshotError(f"Snapshot {path} contains an invalid block: {exc}") from exc

    logger.info("snapshot_loaded path=%s blocks=%s", path, store.size())
    return store
