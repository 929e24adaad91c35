"""
End-to-end walkthrough of the reading core against a throwaway local store.

This script exercises:
1. Configuration loading
2. Creating readings (including a rejected one)
3. History view with classification
4. Editing a reading
5. 3-day and 7-day trend series

Run with: uv run python demo_system.py
"""

import asyncio
import tempfile
from datetime import UTC, datetime, timedelta, tzinfo

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bptracker.config import get_config, print_config_summary
from bptracker.domain.models import Reading, Window
from bptracker.logging_setup import configure_logging
from bptracker.services.aggregator import build_trend
from bptracker.services.classifier import classify_reading
from bptracker.services.reconciler import EditReconciler
from bptracker.services.repository import ReadingRepository
from bptracker_adapters.local.kv import JsonFileKeyValueStore
from bptracker_adapters.local.store import LocalReadingStore

console = Console()


def history_table(readings: list[Reading]) -> Table:
    table = Table(title="Reading History")
    table.add_column("When", style="cyan")
    table.add_column("BP", style="white")
    table.add_column("Pulse", style="white")
    table.add_column("Status")
    table.add_column("Note", style="dim")

    for reading in readings:
        category = classify_reading(reading)
        table.add_row(
            reading.timestamp.strftime("%Y-%m-%d %H:%M"),
            f"{reading.systolic}/{reading.diastolic}",
            str(reading.heart_rate),
            f"[{category.color}]{category.label}[/]",
            reading.note or "",
        )
    return table


def trend_table(readings: list[Reading], window: Window, now: datetime, tz: tzinfo) -> Table:
    trend = build_trend(readings, window, now, tz)
    table = Table(title=f"Last {window.days} days")
    table.add_column("Date", style="cyan")
    for name, color in zip(trend.series.legend, trend.series.colors, strict=True):
        table.add_column(name, style=color)

    if not trend.has_readings:
        table.caption = "No readings recorded yet"
    elif not trend.has_readings_in_window:
        table.caption = "No readings in this period"

    series = trend.series
    for row in zip(
        series.labels, series.systolic, series.diastolic, series.heart_rate, strict=True
    ):
        table.add_row(*(str(v) for v in row))
    return table


async def run_demo(data_dir: str) -> bool:
    repository = ReadingRepository(LocalReadingStore(JsonFileKeyValueStore(data_dir)))
    reconciler = EditReconciler(repository)
    now = datetime.now(UTC).replace(microsecond=0)

    console.print(Panel("Recording readings", style="blue"))
    drafts = [
        {"systolic": 118, "diastolic": 76, "heart_rate": 64, "timestamp": now - timedelta(days=9)},
        {"systolic": 131, "diastolic": 84, "heart_rate": 72, "timestamp": now - timedelta(days=5)},
        {"systolic": 145, "diastolic": 92, "heart_rate": 80, "timestamp": now - timedelta(days=2)},
        {"systolic": 122, "diastolic": 79, "heart_rate": 70, "timestamp": now - timedelta(hours=3)},
    ]
    for draft in drafts:
        result = await repository.create(draft)
        if result.is_err():
            console.print(f"Failed to save reading: {result.unwrap_err()}", style="red")
            return False

    rejected = await repository.create({"systolic": 400, "diastolic": 80, "heart_rate": 70})
    console.print(f"Rejected out-of-range reading: {rejected.unwrap_err()}", style="yellow")

    loaded = await repository.load_all(descending=True)
    if loaded.is_err():
        console.print(f"Failed to load readings: {loaded.unwrap_err()}", style="red")
        return False
    console.print(history_table(loaded.unwrap()))

    console.print(Panel("Editing the latest reading", style="blue"))
    latest = loaded.unwrap()[0]
    edited = await reconciler.reconcile(latest, {"note": "after coffee", "heart_rate": 74})
    if edited.is_err():
        console.print(f"Failed to save changes: {edited.unwrap_err()}", style="red")
        return False
    console.print(f"Updated {edited.unwrap().id}: note={edited.unwrap().note!r}", style="green")

    console.print(Panel("Trends", style="blue"))
    display = get_config().display
    readings = repository.readings
    default_window = Window.last_n_days(display.default_window_days)
    for window in dict.fromkeys([default_window, Window.LAST_3_DAYS, Window.LAST_7_DAYS]):
        console.print(trend_table(readings, window, now, display.tzinfo))
    return True


async def main() -> None:
    configure_logging(get_config().logging)
    print_config_summary()

    with tempfile.TemporaryDirectory() as data_dir:
        ok = await run_demo(data_dir)

    console.print("Demo finished" if ok else "Demo failed", style="green" if ok else "red")


if __name__ == "__main__":
    asyncio.run(main())
