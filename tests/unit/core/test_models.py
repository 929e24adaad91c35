"""
Tests for the Result type and the reading domain models.

Testing philosophy:
- Fast feedback (unit tests run in milliseconds)
- Property-based testing for range boundaries
- Clear test names that describe behavior
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError as PydanticValidationError

from bptracker.domain.errors import NotFoundError, StoreError, ValidationError
from bptracker.domain.models import (
    Category,
    ChartSeries,
    Reading,
    ReadingDraft,
    ReadingEdits,
    TrendView,
    Window,
)
from bptracker.domain.result import Result

NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)


class TestResult:
    """Test the Result type for explicit error handling."""

    def test_result_ok_creates_successful_result(self) -> None:
        result: Result[str, Exception] = Result.ok("success")
        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == "success"

    def test_result_ok_may_carry_none(self) -> None:
        result: Result[None, Exception] = Result.ok(None)
        assert result.is_ok()
        assert result.unwrap() is None

    def test_result_error_creates_failed_result(self) -> None:
        error = ValueError("test error")
        result: Result[str, ValueError] = Result.err(error)
        assert not result.is_ok()
        assert result.is_err()
        assert result.unwrap_or("default") == "default"
        assert result.unwrap_err() is error

    def test_unwrap_raises_on_error_result(self) -> None:
        result: Result[str, ValueError] = Result.err(ValueError("test error"))

        with pytest.raises(ValueError, match="test error"):
            result.unwrap()

    def test_unwrap_err_on_ok_raises(self) -> None:
        with pytest.raises(ValueError, match="Ok value"):
            Result.ok(1).unwrap_err()

    def test_result_requires_exactly_one_side(self) -> None:
        with pytest.raises(ValueError):
            Result()
        with pytest.raises(ValueError):
            Result(value=1, error=ValueError("both"))


class TestErrors:
    def test_store_error_carries_operation_and_cause(self) -> None:
        cause = ConnectionError("boom")
        error = StoreError("get_all", cause)
        assert error.operation == "get_all"
        assert error.cause is cause
        assert error.__cause__ is cause
        assert "get_all" in str(error)

    def test_validation_error_joins_messages(self) -> None:
        error = ValidationError(["Systolic: too high", "Heart rate: missing"])
        assert error.messages == ["Systolic: too high", "Heart rate: missing"]
        assert "Systolic: too high" in str(error)

    def test_not_found_error_names_the_id(self) -> None:
        assert NotFoundError("abc").reading_id == "abc"


class TestReading:
    """Test domain models with property-based testing."""

    @given(
        systolic=st.integers(min_value=40, max_value=300),
        diastolic=st.integers(min_value=20, max_value=200),
        heart_rate=st.integers(min_value=20, max_value=250),
    )
    def test_in_range_values_always_accepted(
        self, systolic: int, diastolic: int, heart_rate: int
    ) -> None:
        reading = Reading(
            id="r1",
            systolic=systolic,
            diastolic=diastolic,
            heart_rate=heart_rate,
            timestamp=NOW,
        )
        assert (reading.systolic, reading.diastolic, reading.heart_rate) == (
            systolic,
            diastolic,
            heart_rate,
        )

    @pytest.mark.parametrize(
        "field,value",
        [
            ("systolic", 39),
            ("systolic", 301),
            ("diastolic", 19),
            ("diastolic", 201),
            ("heart_rate", 19),
            ("heart_rate", 251),
        ],
    )
    def test_out_of_range_values_rejected_not_clamped(self, field: str, value: int) -> None:
        data = {"id": "r1", "systolic": 120, "diastolic": 80, "heart_rate": 70, "timestamp": NOW}
        data[field] = value

        with pytest.raises(PydanticValidationError):
            Reading(**data)

    def test_reading_is_immutable(self) -> None:
        reading = Reading(id="r1", systolic=120, diastolic=80, heart_rate=70, timestamp=NOW)

        with pytest.raises(PydanticValidationError, match="frozen"):
            reading.systolic = 130  # type: ignore[misc]

    @pytest.mark.parametrize("note", ["", "   ", "\n\t"])
    def test_blank_note_means_no_note(self, note: str) -> None:
        reading = Reading(
            id="r1", systolic=120, diastolic=80, heart_rate=70, timestamp=NOW, note=note
        )
        assert reading.note is None

    def test_note_is_stripped(self) -> None:
        reading = Reading(
            id="r1", systolic=120, diastolic=80, heart_rate=70, timestamp=NOW, note="  ok "
        )
        assert reading.note == "ok"

    def test_naive_timestamp_is_treated_as_utc(self) -> None:
        reading = Reading(
            id="r1", systolic=120, diastolic=80, heart_rate=70, timestamp=datetime(2024, 1, 1)
        )
        assert reading.timestamp.tzinfo == UTC

    def test_sub_millisecond_precision_is_dropped(self) -> None:
        reading = Reading(
            id="r1",
            systolic=120,
            diastolic=80,
            heart_rate=70,
            timestamp=datetime(2024, 1, 1, 0, 0, 0, 1999, tzinfo=UTC),
        )
        assert reading.timestamp.microsecond == 1000

    def test_aware_timestamp_keeps_its_offset(self) -> None:
        kyiv_summer = timezone(timedelta(hours=3))
        ts = datetime(2024, 6, 1, 9, 0, tzinfo=kyiv_summer)
        reading = Reading(id="r1", systolic=120, diastolic=80, heart_rate=70, timestamp=ts)
        assert reading.timestamp == ts


class TestReadingDraft:
    def test_timestamp_defaults_to_now(self) -> None:
        before = datetime.now(UTC) - timedelta(milliseconds=1)
        draft = ReadingDraft(systolic=120, diastolic=80, heart_rate=70)
        after = datetime.now(UTC)
        assert before <= draft.timestamp <= after
        assert draft.timestamp.microsecond % 1000 == 0

    def test_explicit_timestamp_keeps_whole_milliseconds(self) -> None:
        ts = datetime(2024, 6, 10, 8, 30, 15, 923819, tzinfo=UTC)
        draft = ReadingDraft(systolic=120, diastolic=80, heart_rate=70, timestamp=ts)
        assert draft.timestamp == datetime(2024, 6, 10, 8, 30, 15, 923000, tzinfo=UTC)
        assert draft.to_reading("r1").timestamp == draft.timestamp

    @pytest.mark.parametrize("missing", ["systolic", "diastolic", "heart_rate"])
    def test_numeric_fields_required(self, missing: str) -> None:
        data = {"systolic": 120, "diastolic": 80, "heart_rate": 70}
        del data[missing]

        with pytest.raises(PydanticValidationError):
            ReadingDraft(**data)

    def test_to_reading_assigns_id(self) -> None:
        draft = ReadingDraft(systolic=120, diastolic=80, heart_rate=70, timestamp=NOW, note="x")
        reading = draft.to_reading("abc")
        assert reading.id == "abc"
        assert reading.model_dump(exclude={"id"}) == draft.model_dump()


class TestReadingEdits:
    def test_changes_only_include_present_fields(self) -> None:
        edits = ReadingEdits(note="x")
        assert edits.changes() == {"note": "x"}

    def test_blank_note_edit_clears_note(self) -> None:
        edits = ReadingEdits(note="   ")
        assert edits.changes() == {"note": None}

    def test_id_and_timestamp_are_dropped(self) -> None:
        edits = ReadingEdits.model_validate({"id": "other", "timestamp": NOW, "systolic": 125})
        assert edits.changes() == {"systolic": 125}

    def test_numeric_field_cannot_be_nulled(self) -> None:
        with pytest.raises(PydanticValidationError, match="cannot be removed"):
            ReadingEdits(systolic=None)

    def test_range_rules_apply_to_edits(self) -> None:
        with pytest.raises(PydanticValidationError):
            ReadingEdits(diastolic=500)


class TestCategory:
    @pytest.mark.parametrize(
        "category,color",
        [(Category.NORMAL, "#22c55e"), (Category.ELEVATED, "#f59e0b"), (Category.HIGH, "#ef4444")],
    )
    def test_each_category_has_fixed_color(self, category: Category, color: str) -> None:
        assert category.color == color
        assert category.label.endswith("Blood Pressure")
        assert category.description


class TestWindowAndSeries:
    def test_predefined_windows(self) -> None:
        assert Window.LAST_3_DAYS.days == 3
        assert Window.LAST_7_DAYS.days == 7
        assert Window.last_n_days(30) == Window(days=30)

    def test_window_must_be_positive(self) -> None:
        with pytest.raises(PydanticValidationError):
            Window(days=0)

    def test_empty_series(self) -> None:
        series = ChartSeries.empty()
        assert series.is_empty
        assert series.labels == ()
        assert series.legend == ("Systolic", "Diastolic", "Heart Rate")

    def test_trend_view_flags(self) -> None:
        view = TrendView(window=Window.LAST_3_DAYS, series=ChartSeries.empty(), total_readings=1)
        assert view.has_readings
        assert not view.has_readings_in_window
