"""CaseStore abstract interface."""

from abc import ABC, abstractmethod

from caseintake.admission.models import Case, CaseState


class CaseStore(ABC):
    """Abstract interface for case storage."""

    @abstractmethod
    async def get(self, case_id: str) -> Case | None:
        """Get a case by ID."""
        pass

    @abstractmethod
    async def save(self, case: Case) -> str:
        """Save a case, returning its ID."""
        pass

    @abstractmethod
    async def list_by_customer(
        self,
        customer_id: str,
        *,
        state: CaseState | None = None,
        limit: int = 100,
    ) -> list[Case]:
        """List cases of a customer with optional state filter.

        Customer ids are GUIDs and match regardless of letter case.
        """
        pass
