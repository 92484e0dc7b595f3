from __future__ import annotations

from datetime import date, datetime
import logging

import typer
from rich import print
from rich.markup import escape

from timeblocks.block_service import find_overlaps
from timeblocks.config import AppSettings, load_settings
from timeblocks.models import TimeBlock, TimeBlockType
from timeblocks.snapshot import SnapshotError, dump_snapshot, load_snapshot
from timeblocks.store import TimeBlockStore
from timeblocks.timeutil import parse_date_ymd, parse_time_hhmm

app = typer.Typer(
    name="tblocks",
    help="Inspect and edit a time block snapshot.",
    no_args_is_help=True,
)


def _parse_date(value: str, field_name: str = "date") -> date:
    try:
        return parse_date_ymd(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid --{field_name} format. Expected YYYY-MM-DD.") from exc


def _parse_datetime(day: date, value: str, field_name: str) -> datetime:
    try:
        return datetime.combine(day, parse_time_hhmm(value))
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid --{field_name} format. Expected HH:MM.") from exc


def _parse_block_type(value: str | None, settings: AppSettings) -> TimeBlockType:
    if value is None:
        return settings.default_block_type
    try:
        return TimeBlockType(value.strip().upper())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in TimeBlockType)
        raise typer.BadParameter(f"Invalid --type. Expected one of: {allowed}.") from exc


def _settings() -> AppSettings:
    try:
        return load_settings()
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _open_store(settings: AppSettings) -> TimeBlockStore:
    try:
        return load_snapshot(settings.snapshot_path)
    except SnapshotError as exc:
        print(f"[red]Cannot read snapshot:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _format_block(block: TimeBlock) -> str:
    end_format = "%Y-%m-%d %H:%M" if block.is_multi_day() else "%H:%M"
    title = escape(block.title) if block.title else "(untitled)"
    return (
        f"- {block.start_time.strftime('%H:%M')}–{block.end_time.strftime(end_format)} "
        f"| {block.block_type.value} | {title} (id={escape(block.id)})"
    )


@app.callback()
def root() -> None:
    """Time block store entrypoint."""
    settings = _settings()
    logging.basicConfig(level=settings.log_level)


@app.command("add")
def add(
    block_id: str = typer.Option(..., "--id", help="Unique block id."),
    date_value: str = typer.Option(..., "--date", help="Start date in YYYY-MM-DD."),
    start: str = typer.Option(..., "--start", help="Start time in HH:MM."),
    end: str = typer.Option(..., "--end", help="End time in HH:MM."),
    end_date_value: str | None = typer.Option(None, "--end-date", help="End date for multi-day blocks."),
    title: str = typer.Option("", "--title", help="Block title."),
    block_type: str | None = typer.Option(None, "--type", help="Block type (WORK, FOCUS, ...)."),
) -> None:
    """Add a block, replacing any block with the same id."""
    settings = _settings()
    start_day = _parse_date(date_value)
    end_day = _parse_date(end_date_value, "end-date") if end_date_value is not None else start_day
    try:
        block = TimeBlock(
            id=block_id.strip(),
            start_time=_parse_datetime(start_day, start, "start"),
            end_time=_parse_datetime(end_day, end, "end"),
            title=title.strip(),
            block_type=_parse_block_type(block_type, settings),
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    store = _open_store(settings)
    replaced = store.contains_block(block.id)
    store.add_block(block)
    dump_snapshot(store, settings.snapshot_path)

    action = "Replaced" if replaced else "Added"
    print(f"[green]{action} time block:[/green] {block.id} ({block.start_date().isoformat()})")


@app.command("update")
def update(
    block_id: str = typer.Option(..., "--id", help="Id of the block to move."),
    date_value: str = typer.Option(..., "--date", help="New start date in YYYY-MM-DD."),
    start: str = typer.Option(..., "--start", help="New start time in HH:MM."),
    end: str = typer.Option(..., "--end", help="New end time in HH:MM."),
    end_date_value: str | None = typer.Option(None, "--end-date", help="New end date for multi-day blocks."),
) -> None:
    """Move an existing block to a new time, keeping its other fields."""
    settings = _settings()
    start_day = _parse_date(date_value)
    end_day = _parse_date(end_date_value, "end-date") if end_date_value is not None else start_day
    new_start = _parse_datetime(start_day, start, "start")
    new_end = _parse_datetime(end_day, end, "end")

    store = _open_store(settings)
    existing = store.get_block_by_id(block_id.strip())
    if existing is None:
        raise typer.BadParameter(f"Time block {block_id.strip()} not found.")
    try:
        moved = existing.with_updated_time(new_start, new_end)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    store.update_block(moved)
    dump_snapshot(store, settings.snapshot_path)
    print(f"[green]Updated time block:[/green] {moved.id} ({moved.start_date().isoformat()})")


@app.command("remove")
def remove(block_id: str = typer.Option(..., "--id", help="Id of the block to remove.")) -> None:
    """Remove a block by id."""
    settings = _settings()
    store = _open_store(settings)
    if not store.remove_block(block_id.strip()):
        raise typer.BadParameter(f"Time block {block_id.strip()} not found.")

    dump_snapshot(store, settings.snapshot_path)
    print(f"[green]Removed time block:[/green] {block_id.strip()}")


@app.command("remove-date")
def remove_date(date_value: str = typer.Option(..., "--date", help="Date in YYYY-MM-DD.")) -> None:
    """Remove every block anchored on a date."""
    settings = _settings()
    day = _parse_date(date_value)
    store = _open_store(settings)
    removed = store.remove_blocks_for_date(day)
    if removed:
        dump_snapshot(store, settings.snapshot_path)
    print(f"Removed {removed} time block(s) on {day.isoformat()}")


@app.command("clear")
def clear() -> None:
    """Remove every block."""
    settings = _settings()
    store = _open_store(settings)
    store.clear()
    dump_snapshot(store, settings.snapshot_path)
    print("[green]Cleared all time blocks.[/green]")


@app.command("day")
def day(date_value: str = typer.Option(..., "--date", help="Date in YYYY-MM-DD.")) -> None:
    """List blocks starting on a date."""
    settings = _settings()
    local_date = _parse_date(date_value)
    blocks = _open_store(settings).get_blocks_for_date(local_date)
    if not blocks:
        print(f"[yellow]No time blocks for {local_date.isoformat()}[/yellow]")
        return

    print(f"[bold]Time blocks for {local_date.isoformat()}:[/bold]")
    for block in blocks:
        print(_format_block(block))


@app.command("range")
def range_(
    start_date_value: str = typer.Option(..., "--start-date", help="First date in YYYY-MM-DD."),
    end_date_value: str = typer.Option(..., "--end-date", help="Last date in YYYY-MM-DD."),
) -> None:
    """List blocks overlapping an inclusive date range."""
    settings = _settings()
    start_date = _parse_date(start_date_value, "start-date")
    end_date = _parse_date(end_date_value, "end-date")
    store = _open_store(settings)
    try:
        blocks = store.get_blocks_in_range(start_date, end_date)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    print(f"[bold]Range:[/bold] {start_date.isoformat()}..{end_date.isoformat()}")
    print(f"Count: {len(blocks)}")
    for block in blocks:
        print(f"{block.start_date().isoformat()} {_format_block(block)}")


@app.command("overlaps")
def overlaps(date_value: str = typer.Option(..., "--date", help="Date in YYYY-MM-DD.")) -> None:
    """Report overlapping blocks on a date."""
    settings = _settings()
    local_date = _parse_date(date_value)
    pairs = find_overlaps(_open_store(settings).get_blocks_for_date(local_date))
    if not pairs:
        print(f"[green]No overlaps on {local_date.isoformat()}[/green]")
        return

    print(f"[red]Overlaps on {local_date.isoformat()}:[/red] {len(pairs)}")
    for first, second in pairs:
        print(f"- {escape(first.id)} ↔ {escape(second.id)}")


def main() -> None:
    app()
