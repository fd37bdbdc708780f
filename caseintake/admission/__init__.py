"""Server-side case admission: one active case per customer."""

from caseintake.admission.models import Case, CaseState, TargetRecord
from caseintake.admission.rule import CaseAdmissionRule
from caseintake.admission.store import CaseStore
from caseintake.admission.stores import InMemoryCaseStore

__all__ = [
    "Case",
    "CaseState",
    "TargetRecord",
    "CaseAdmissionRule",
    "CaseStore",
    "InMemoryCaseStore",
]
