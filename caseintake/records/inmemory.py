"""In-memory implementation of RecordService."""

from collections.abc import Sequence
from typing import Any

from caseintake.exceptions import RecordFetchError, RecordNotFoundError
from caseintake.form.models import normalize_record_id
from caseintake.records.service import RecordService


class InMemoryRecordService(RecordService):
    """In-memory record service for testing and development.

    Records are keyed by (record_type, id). A failure registered for a
    record is raised instead of returning it. Every call is recorded.
    """

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], dict[str, Any]] = {}
        self._failures: dict[tuple[str, str], RecordFetchError] = {}
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    def add_record(self, record_type: str, record_id: str, **fields: Any) -> None:
        """Store a record; fields not given are treated as having no value."""
        self._records[(record_type, normalize_record_id(record_id))] = dict(fields)

    def fail_with(self, record_type: str, record_id: str, error: RecordFetchError) -> None:
        """Make lookups of one record raise the given error."""
        self._failures[(record_type, normalize_record_id(record_id))] = error

    async def fetch(
        self,
        record_type: str,
        record_id: str,
        fields: Sequence[str],
    ) -> dict[str, Any]:
        key = (record_type, normalize_record_id(record_id))
        self._call_history.append({
            "record_type": record_type,
            "record_id": key[1],
            "fields": list(fields),
        })

        if key in self._failures:
            raise self._failures[key]

        record = self._records.get(key)
        if record is None:
            raise RecordNotFoundError(
                f"{record_type} {key[1]} does not exist",
                record_type=record_type,
                record_id=key[1],
            )

        return {field: record.get(field) for field in fields}
