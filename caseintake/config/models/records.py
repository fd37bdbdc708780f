"""Remote record service configuration models."""

from pydantic import BaseModel, Field, SecretStr


class RecordServiceConfig(BaseModel):
    """Record types, projected fields and Web API connection settings."""

    organization_type: str = Field(default="account", description="Organization record type")
    person_type: str = Field(default="contact", description="Person record type")
    case_type: str = Field(default="incident", description="Case record type")
    linked_person_field: str = Field(
        default="_primarycontactid_value",
        description="Organization field holding the linked person id",
    )
    display_name_field: str = Field(
        default="fullname",
        description="Person field used as the lookup display name",
    )
    base_url: str = Field(default="http://localhost:8080", description="Web API root URL")
    api_version: str = Field(default="v9.2", description="Web API version segment")
    access_token: SecretStr | None = Field(
        default=None,
        description="Bearer token (from CASEINTAKE_RECORDS__ACCESS_TOKEN)",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds; None waits indefinitely",
    )
    entity_sets: dict[str, str] = Field(
        default_factory=lambda: {
            "account": "accounts",
            "contact": "contacts",
            "incident": "incidents",
        },
        description="Record type to Web API collection name",
    )
