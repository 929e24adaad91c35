"""
Boundary validation for reading payloads.

Turns pydantic validation failures into the core's ``ValidationError`` with
one human-readable message per offending field.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bptracker.domain.errors import ValidationError
from bptracker.domain.models import Reading, ReadingDraft, ReadingEdits
from bptracker.domain.result import Result

_FIELD_LABELS = {
    "systolic": "Systolic",
    "diastolic": "Diastolic",
    "heart_rate": "Heart rate",
    "timestamp": "Timestamp",
    "note": "Note",
    "id": "Id",
}


def error_messages(exc: PydanticValidationError) -> list[str]:
    """Flatten a pydantic error into ``"<Field>: <reason>"`` strings."""
    messages = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else ""
        label = _FIELD_LABELS.get(field, field)
        reason = error.get("msg", "is invalid")
        messages.append(f"{label}: {reason}" if label else reason)
    return messages


def _validate(model: type[BaseModel], data: Any) -> Result[Any, ValidationError]:
    if isinstance(data, model):
        return Result.ok(data)
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    if not isinstance(data, Mapping):
        return Result.err(ValidationError([f"Expected a mapping, got {type(data).__name__}"]))
    try:
        return Result.ok(model.model_validate(dict(data)))
    except PydanticValidationError as e:
        return Result.err(ValidationError(error_messages(e)))


def validate_draft(
    data: ReadingDraft | Mapping[str, Any]
) -> Result[ReadingDraft, ValidationError]:
    """Validate a creation payload: all three numeric fields present and in range."""
    return _validate(ReadingDraft, data)


def validate_edits(
    data: ReadingEdits | Mapping[str, Any]
) -> Result[ReadingEdits, ValidationError]:
    """Validate a partial edit: only present fields are checked."""
    return _validate(ReadingEdits, data)


def merge_reading(
    existing: Reading, changes: Mapping[str, Any]
) -> Result[Reading, ValidationError]:
    """
    Apply ``changes`` onto ``existing`` and validate the merged record.

    ``id`` and ``timestamp`` always come from ``existing``.
    """
    merged = existing.model_dump()
    merged.update({k: v for k, v in changes.items() if k not in ReadingEdits.IGNORED_FIELDS})
    try:
        return Result.ok(Reading.model_validate(merged))
    except PydanticValidationError as e:
        return Result.err(ValidationError(error_messages(e)))
