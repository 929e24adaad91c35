"""
Domain models for blood pressure readings.

These models represent the core business concepts and are storage-agnostic:
backend-specific field names (``heartRate``, epoch-ms timestamps, DTO
envelopes) are translated inside the store adapters and never reach here.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SYSTOLIC_MIN, SYSTOLIC_MAX = 40, 300
DIASTOLIC_MIN, DIASTOLIC_MAX = 20, 200
HEART_RATE_MIN, HEART_RATE_MAX = 20, 250

Systolic = Annotated[int, Field(ge=SYSTOLIC_MIN, le=SYSTOLIC_MAX, description="mmHg")]
Diastolic = Annotated[int, Field(ge=DIASTOLIC_MIN, le=DIASTOLIC_MAX, description="mmHg")]
HeartRate = Annotated[int, Field(ge=HEART_RATE_MIN, le=HEART_RATE_MAX, description="bpm")]

NUMERIC_FIELDS = ("systolic", "diastolic", "heart_rate")


def normalize_note(value: Any) -> str | None:
    """Blank notes mean "no note"; anything else is stripped."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("note must be a string")
    value = value.strip()
    return value or None


def ensure_aware(value: datetime) -> datetime:
    # Naive timestamps are treated as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def normalize_timestamp(value: datetime) -> datetime:
    """Aware, with millisecond precision: the finest unit every store keeps."""
    value = ensure_aware(value)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utc_now() -> datetime:
    return normalize_timestamp(datetime.now(UTC))


class Category(str, Enum):
    """Blood pressure risk bands."""

    NORMAL = "normal"
    ELEVATED = "elevated"
    HIGH = "high"

    @property
    def info(self) -> "CategoryInfo":
        return CATEGORY_INFO[self]

    @property
    def color(self) -> str:
        return self.info.color

    @property
    def label(self) -> str:
        return self.info.title

    @property
    def description(self) -> str:
        return self.info.description


class CategoryInfo(BaseModel):
    """Fixed display attributes of a category."""

    model_config = ConfigDict(frozen=True)

    color: str
    title: str
    description: str


CATEGORY_INFO: dict[Category, CategoryInfo] = {
    Category.HIGH: CategoryInfo(
        color="#ef4444",
        title="High Blood Pressure",
        description=(
            "Systolic ≥ 140 or Diastolic ≥ 90. "
            "Consider consulting with a healthcare professional."
        ),
    ),
    Category.ELEVATED: CategoryInfo(
        color="#f59e0b",
        title="Elevated Blood Pressure",
        description=(
            "Systolic 120-139 or Diastolic 80-89. "
            "Consider lifestyle changes to lower your blood pressure."
        ),
    ),
    Category.NORMAL: CategoryInfo(
        color="#22c55e",
        title="Normal Blood Pressure",
        description="Systolic < 120 and Diastolic < 80. Keep up the good work!",
    ),
}


class Reading(BaseModel):
    """One recorded blood pressure / heart rate observation."""

    model_config = ConfigDict(frozen=True)  # Mutated only by building a new instance

    id: str = Field(min_length=1, description="Opaque identifier assigned by the store")
    systolic: Systolic
    diastolic: Diastolic
    heart_rate: HeartRate
    timestamp: datetime
    note: str | None = None

    strip_note = field_validator("note", mode="before")(normalize_note)
    align_timestamp = field_validator("timestamp")(normalize_timestamp)


class ReadingDraft(BaseModel):
    """Payload for creating a reading; the store assigns the id."""

    model_config = ConfigDict(frozen=True)

    systolic: Systolic
    diastolic: Diastolic
    heart_rate: HeartRate
    timestamp: datetime = Field(default_factory=utc_now)
    note: str | None = None

    strip_note = field_validator("note", mode="before")(normalize_note)
    align_timestamp = field_validator("timestamp")(normalize_timestamp)

    def to_reading(self, reading_id: str) -> Reading:
        return Reading(id=reading_id, **self.model_dump())


class ReadingEdits(BaseModel):
    """
    Partial edit of an existing reading.

    Only fields present in the payload are applied. ``id`` and ``timestamp``
    are not editable; unknown keys are dropped.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    IGNORED_FIELDS: ClassVar[tuple[str, ...]] = ("id", "timestamp")

    systolic: Systolic | None = None
    diastolic: Diastolic | None = None
    heart_rate: HeartRate | None = None
    note: str | None = None

    strip_note = field_validator("note", mode="before")(normalize_note)

    @model_validator(mode="after")
    def numeric_fields_not_cleared(self) -> "ReadingEdits":
        for name in NUMERIC_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be removed from a reading")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the edit, with their validated values."""
        return {name: getattr(self, name) for name in sorted(self.model_fields_set)}


class Window(BaseModel):
    """Trailing time span used to filter readings for trend display."""

    model_config = ConfigDict(frozen=True)

    LAST_3_DAYS: ClassVar["Window"]
    LAST_7_DAYS: ClassVar["Window"]

    days: int = Field(gt=0, description="Length of the window in days")

    @classmethod
    def last_n_days(cls, days: int) -> "Window":
        return cls(days=days)


Window.LAST_3_DAYS = Window(days=3)
Window.LAST_7_DAYS = Window(days=7)

SERIES_LEGEND: tuple[str, str, str] = ("Systolic", "Diastolic", "Heart Rate")
SERIES_COLORS: tuple[str, str, str] = ("#ef4444", "#f59e0b", "#0284c7")


class ChartSeries(BaseModel):
    """Per-series numeric arrays for a trend chart, positionally aligned with ``labels``."""

    model_config = ConfigDict(frozen=True)

    labels: tuple[str, ...] = ()
    timestamps: tuple[datetime, ...] = ()
    systolic: tuple[int, ...] = ()
    diastolic: tuple[int, ...] = ()
    heart_rate: tuple[int, ...] = ()
    categories: tuple[Category, ...] = ()
    legend: tuple[str, str, str] = SERIES_LEGEND
    colors: tuple[str, str, str] = SERIES_COLORS

    @classmethod
    def empty(cls) -> "ChartSeries":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.labels


class TrendView(BaseModel):
    """Chart series plus the size of the unfiltered input."""

    model_config = ConfigDict(frozen=True)

    window: Window
    series: ChartSeries
    total_readings: int = Field(ge=0)

    @property
    def has_readings(self) -> bool:
        return self.total_readings > 0

    @property
    def has_readings_in_window(self) -> bool:
        return not self.series.is_empty
