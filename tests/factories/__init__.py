"""Test factories for creating test data."""

from tests.factories.forms import LAYOUT, RECORDS, CaseFormFactory, RecordServiceFactory

__all__ = [
    "LAYOUT",
    "RECORDS",
    "CaseFormFactory",
    "RecordServiceFactory",
]
