"""RecordService abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any


class RecordService(ABC):
    """Point lookup of a single record, projected to a set of fields.

    Implementations raise a RecordFetchError subclass on failure:
    RecordNotFoundError, TransientFetchError or RecordAccessDeniedError.
    """

    @abstractmethod
    async def fetch(
        self,
        record_type: str,
        record_id: str,
        fields: Sequence[str],
    ) -> dict[str, Any]:
        """Fetch a record, returning only the requested fields.

        Fields the record has no value for are returned as None.
        """
        pass
