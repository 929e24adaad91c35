"""
Time-window aggregation for trend charts.

Pure and synchronous: the current instant is injected, nothing is cached
between calls, identical inputs give identical output.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta, tzinfo

from bptracker.domain.models import (
    NUMERIC_FIELDS,
    ChartSeries,
    Reading,
    TrendView,
    Window,
    ensure_aware,
)
from bptracker.services.classifier import classify


def window_cutoff(window: Window, now: datetime) -> datetime:
    return ensure_aware(now) - timedelta(days=window.days)


def filter_window(readings: Iterable[Reading], window: Window, now: datetime) -> list[Reading]:
    """Readings with ``timestamp >= now - window``, ascending. Future readings are kept."""
    cutoff = window_cutoff(window, now)
    in_window = [r for r in readings if r.timestamp >= cutoff]
    return sorted(in_window, key=lambda r: r.timestamp)


def chart_label(timestamp: datetime, tz: tzinfo = UTC) -> str:
    local = timestamp.astimezone(tz)
    return f"{local.month}/{local.day}"


def _numeric_values(reading: Reading) -> tuple[int, int, int] | None:
    # Incomplete readings are dropped from every series, never partially plotted
    values = tuple(getattr(reading, name, None) for name in NUMERIC_FIELDS)
    if any(v is None for v in values):
        return None
    return values  # type: ignore[return-value]


def aggregate(
    readings: Iterable[Reading],
    window: Window,
    now: datetime,
    tz: tzinfo = UTC,
) -> ChartSeries:
    """
    Filter ``readings`` to the trailing ``window`` and reshape them into
    aligned systolic / diastolic / heart-rate series.

    Returns ``ChartSeries.empty()`` when nothing falls inside the window.
    """
    labels: list[str] = []
    timestamps: list[datetime] = []
    systolic: list[int] = []
    diastolic: list[int] = []
    heart_rate: list[int] = []
    categories = []

    for reading in filter_window(readings, window, now):
        values = _numeric_values(reading)
        if values is None:
            continue
        sys_v, dia_v, hr_v = values
        labels.append(chart_label(reading.timestamp, tz))
        timestamps.append(reading.timestamp)
        systolic.append(sys_v)
        diastolic.append(dia_v)
        heart_rate.append(hr_v)
        categories.append(classify(sys_v, dia_v))

    if not labels:
        return ChartSeries.empty()

    return ChartSeries(
        labels=tuple(labels),
        timestamps=tuple(timestamps),
        systolic=tuple(systolic),
        diastolic=tuple(diastolic),
        heart_rate=tuple(heart_rate),
        categories=tuple(categories),
    )


def build_trend(
    readings: Sequence[Reading],
    window: Window,
    now: datetime,
    tz: tzinfo = UTC,
) -> TrendView:
    """Series plus the unfiltered count, so "no data" and "no data in window" stay distinct."""
    return TrendView(
        window=window,
        series=aggregate(readings, window, now, tz),
        total_readings=len(readings),
    )
