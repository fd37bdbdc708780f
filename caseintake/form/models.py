"""Value models shared by the case form components."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CustomerVariant(str, Enum):
    """The two kinds of record a customer lookup can point at."""

    ORGANIZATION = "organization"
    PERSON = "person"


class RequirementLevel(str, Enum):
    """Requirement level of a form attribute."""

    NONE = "none"
    REQUIRED = "required"


class NotificationLevel(str, Enum):
    """Severity of a form notification banner."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class NotificationId(str, Enum):
    """Stable identifiers of the banners raised by the case form."""

    LOAD_ERROR = "ErrorNotification"
    ACCOUNT_ERROR = "AccountError"
    CONTACT_ERROR = "ContactError"
    NO_PRIMARY_CONTACT = "NoPrimaryContact"
    NO_CONTACT_DETAILS = "NoContactDetails"
    FORM_LOAD_BANNER = "FormLoadBanner"


def normalize_record_id(record_id: str) -> str:
    """Strip the braces some hosts wrap record ids in."""
    return record_id.replace("{", "").replace("}", "")


class LookupValue(BaseModel):
    """Value of a single-valued lookup field."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Record id, possibly braced")
    entity_type: str = Field(..., description="Logical name of the referenced record type")
    name: str | None = Field(default=None, description="Display name")

    @property
    def normalized_id(self) -> str:
        return normalize_record_id(self.id)


class Notification(BaseModel):
    """A banner shown on the form."""

    model_config = ConfigDict(frozen=True)

    notification_id: str
    message: str
    level: NotificationLevel
