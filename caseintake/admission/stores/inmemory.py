"""In-memory implementation of CaseStore."""

from caseintake.admission.models import Case, CaseState
from caseintake.admission.store import CaseStore


class InMemoryCaseStore(CaseStore):
    """In-memory implementation of CaseStore for testing and development.

    Uses simple dict storage with linear scan for queries.
    """

    def __init__(self) -> None:
        self._cases: dict[str, Case] = {}

    async def get(self, case_id: str) -> Case | None:
        return self._cases.get(case_id)

    async def save(self, case: Case) -> str:
        self._cases[case.id] = case
        return case.id

    async def list_by_customer(
        self,
        customer_id: str,
        *,
        state: CaseState | None = None,
        limit: int = 100,
    ) -> list[Case]:
        customer_key = customer_id.lower()
        results = []
        for case in self._cases.values():
            if case.customer.normalized_id.lower() != customer_key:
                continue
            if state is not None and case.state != state:
                continue
            results.append(case)
        results.sort(key=lambda x: x.created_at, reverse=True)
        return results[:limit]
