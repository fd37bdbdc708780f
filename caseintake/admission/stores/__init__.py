"""Case store implementations."""

from caseintake.admission.stores.inmemory import InMemoryCaseStore

__all__ = ["InMemoryCaseStore"]
