"""Case form host contract, value models and field/notification control."""

from caseintake.form.fields import FieldStateController
from caseintake.form.inmemory import (
    InMemoryAttribute,
    InMemoryControl,
    InMemoryFormSession,
    InMemorySummaryPanel,
)
from caseintake.form.models import (
    CustomerVariant,
    LookupValue,
    Notification,
    NotificationId,
    NotificationLevel,
    RequirementLevel,
    normalize_record_id,
)
from caseintake.form.notifications import MESSAGES, NotificationManager
from caseintake.form.session import FormAttribute, FormControl, FormSession, SummaryPanel

__all__ = [
    # Models
    "CustomerVariant",
    "LookupValue",
    "Notification",
    "NotificationId",
    "NotificationLevel",
    "RequirementLevel",
    "normalize_record_id",
    # Host contract
    "FormAttribute",
    "FormControl",
    "FormSession",
    "SummaryPanel",
    # In-memory host
    "InMemoryAttribute",
    "InMemoryControl",
    "InMemoryFormSession",
    "InMemorySummaryPanel",
    # Controllers
    "FieldStateController",
    "NotificationManager",
    "MESSAGES",
]
