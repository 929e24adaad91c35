"""
Edit reconciliation for existing readings.

Validates a partial edit against the creation rules, then resolves it through
the repository. Invalid edits never reach the repository.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from bptracker.domain.errors import ReadingError
from bptracker.domain.models import Reading, ReadingEdits
from bptracker.domain.result import Result
from bptracker.services.repository import ReadingRepository
from bptracker.services.validation import merge_reading, validate_edits

logger = structlog.get_logger(__name__)


class EditReconciler:
    """Applies user edits to stored readings."""

    def __init__(self, repository: ReadingRepository) -> None:
        self.repository = repository
        self.logger = logger.bind(component="edit_reconciler")

    async def reconcile(
        self, existing: Reading, edits: ReadingEdits | Mapping[str, Any]
    ) -> Result[Reading, ReadingError]:
        """
        Validate ``edits`` and apply them to ``existing``.

        ``id`` and ``timestamp`` in a raw payload are dropped (stale client
        payloads often echo them back). Any other unknown key is dropped with a
        warning. A blank ``note`` clears the note.

        Returns:
            Result[Reading]: the repository's updated reading, or a
            ValidationError / NotFoundError / StoreError.
        """
        if isinstance(edits, Mapping):
            ignored = sorted(k for k in ReadingEdits.IGNORED_FIELDS if k in edits)
            if ignored:
                self.logger.warning(
                    "immutable_fields_ignored", reading_id=existing.id, fields=ignored
                )
            known = ReadingEdits.model_fields.keys() | set(ReadingEdits.IGNORED_FIELDS)
            unknown = sorted(str(k) for k in edits if k not in known)
            if unknown:
                self.logger.warning(
                    "unknown_fields_ignored", reading_id=existing.id, fields=unknown
                )

        validated = validate_edits(edits)
        if validated.is_err():
            return Result.err(validated.unwrap_err())

        changes = validated.unwrap().changes()

        # The merged record must still be a valid reading before anything is written
        merged = merge_reading(existing, changes)
        if merged.is_err():
            return Result.err(merged.unwrap_err())

        if not changes:
            self.logger.debug("empty_edit", reading_id=existing.id)

        return await self.repository.update(existing.id, changes)
