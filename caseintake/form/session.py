"""Host form abstract interface.

The hosting form surface owns fields, controls, embedded panels and
notification banners. Lookups return None for anything the current form
layout does not contain; callers treat None as "skip".
"""

from abc import ABC, abstractmethod
from typing import Any

from caseintake.form.models import NotificationLevel, RequirementLevel


class FormAttribute(ABC):
    """A data-bound field of the form."""

    name: str

    @abstractmethod
    def get_value(self) -> Any:
        """Get the current value."""
        pass

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """Replace the current value; None clears it."""
        pass

    @abstractmethod
    def get_required_level(self) -> RequirementLevel:
        """Get the requirement level."""
        pass

    @abstractmethod
    def set_required_level(self, level: RequirementLevel) -> None:
        """Set the requirement level."""
        pass


class FormControl(ABC):
    """A visual control, usually bound to an attribute."""

    name: str

    @abstractmethod
    def get_visible(self) -> bool:
        """Whether the control is shown."""
        pass

    @abstractmethod
    def set_visible(self, visible: bool) -> None:
        """Show or hide the control."""
        pass

    @abstractmethod
    def get_attribute(self) -> FormAttribute | None:
        """Get the bound attribute.

        Raises:
            FieldAccessError: If the attribute exists but cannot be read
        """
        pass


class SummaryPanel(ABC):
    """Embedded read-only view whose content loads asynchronously.

    The host exposes no load-completion event, only the is_loaded predicate.
    """

    name: str

    @abstractmethod
    def is_loaded(self) -> bool:
        """Whether the panel finished loading its data."""
        pass

    @abstractmethod
    def get_control(self, name: str) -> FormControl | None:
        """Get a child control of the panel."""
        pass

    @abstractmethod
    def get_visible(self) -> bool:
        """Whether the panel is shown."""
        pass

    @abstractmethod
    def set_visible(self, visible: bool) -> None:
        """Show or hide the whole panel."""
        pass


class FormSession(ABC):
    """One open form and everything on it.

    Passed explicitly to every component; there is no ambient form state.
    """

    @property
    @abstractmethod
    def session_id(self) -> str:
        """Identifier of this form session."""
        pass

    @abstractmethod
    def get_attribute(self, name: str) -> FormAttribute | None:
        """Get an attribute by name."""
        pass

    @abstractmethod
    def get_control(self, name: str) -> FormControl | None:
        """Get a control by name."""
        pass

    @abstractmethod
    def get_panel(self, name: str) -> SummaryPanel | None:
        """Get an embedded summary panel by name."""
        pass

    @abstractmethod
    def set_notification(
        self,
        message: str,
        level: NotificationLevel,
        notification_id: str,
    ) -> None:
        """Show a banner, replacing any banner with the same id."""
        pass

    @abstractmethod
    def clear_notification(self, notification_id: str) -> None:
        """Remove the banner with this id; no-op when absent."""
        pass
