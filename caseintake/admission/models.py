"""Case record models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from caseintake.form.models import LookupValue


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class CaseState(str, Enum):
    """Lifecycle state of a case."""

    ACTIVE = "active"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class Case(BaseModel):
    """A stored case record."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Case id")
    customer: LookupValue = Field(..., description="Customer the case is for")
    title: str = Field(default="", description="Case title")
    state: CaseState = Field(default=CaseState.ACTIVE, description="Lifecycle state")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")


class TargetRecord(BaseModel):
    """Record submitted for creation, as seen by server-side rules.

    Attribute values are untyped; lookups may arrive as LookupValue or as
    plain mappings.
    """

    logical_name: str = Field(..., description="Record type being created")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Submitted values")
