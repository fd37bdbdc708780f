"""Case form layout configuration models."""

from pydantic import BaseModel, Field


class FormLayoutConfig(BaseModel):
    """Names of the fields and embedded views the workflow touches."""

    customer_field: str = Field(default="customerid", description="Customer lookup attribute")
    contact_field: str = Field(
        default="primarycontactid",
        description="Primary contact lookup attribute and control",
    )
    panel_name: str = Field(
        default="ContactDetailsQuickView",
        description="Embedded contact summary panel",
    )
    email_field: str = Field(default="emailaddress1", description="Panel email field")
    phone_field: str = Field(default="mobilephone", description="Panel phone field")
    load_banner_message: str | None = Field(
        default=None,
        description="Informational banner shown when the form loads",
    )


class PanelConfig(BaseModel):
    """Summary panel polling configuration."""

    poll_interval_ms: int = Field(
        default=500,
        gt=0,
        description="Interval between panel loaded checks (milliseconds)",
    )

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000
