"""In-memory implementation of the host form surface.

Used for testing and for running the workflow outside a real form host.
"""

from typing import Any
from uuid import uuid4

from caseintake.exceptions import FieldAccessError
from caseintake.form.models import Notification, NotificationLevel, RequirementLevel
from caseintake.form.session import FormAttribute, FormControl, FormSession, SummaryPanel


class InMemoryAttribute(FormAttribute):
    """Attribute holding its value in memory.

    Counts reads so tests can assert how often a field was inspected.
    """

    def __init__(
        self,
        name: str,
        value: Any = None,
        required_level: RequirementLevel = RequirementLevel.NONE,
        *,
        readable: bool = True,
    ) -> None:
        self.name = name
        self._value = value
        self._required_level = required_level
        self._readable = readable
        self.read_count = 0

    def get_value(self) -> Any:
        self.read_count += 1
        if not self._readable:
            raise FieldAccessError(f"No read permission on {self.name}", self.name)
        return self._value

    def set_value(self, value: Any) -> None:
        self._value = value

    def get_required_level(self) -> RequirementLevel:
        return self._required_level

    def set_required_level(self, level: RequirementLevel) -> None:
        self._required_level = level


class InMemoryControl(FormControl):
    """Control with a visibility flag and an optional bound attribute."""

    def __init__(
        self,
        name: str,
        attribute: InMemoryAttribute | None = None,
        *,
        visible: bool = True,
        accessible: bool = True,
    ) -> None:
        self.name = name
        self._attribute = attribute
        self._visible = visible
        self._accessible = accessible

    def get_visible(self) -> bool:
        return self._visible

    def set_visible(self, visible: bool) -> None:
        self._visible = visible

    def get_attribute(self) -> InMemoryAttribute | None:
        if not self._accessible:
            raise FieldAccessError(f"Field {self.name} is not accessible", self.name)
        return self._attribute


class InMemorySummaryPanel(SummaryPanel):
    """Summary panel that reports loaded after a number of checks."""

    def __init__(
        self,
        name: str,
        fields: dict[str, str | None] | None = None,
        *,
        loaded_after_checks: int = 0,
        visible: bool = True,
    ) -> None:
        self.name = name
        self._visible = visible
        self._loaded_after_checks = loaded_after_checks
        self._controls: dict[str, InMemoryControl] = {}
        self.load_checks = 0
        for field_name, value in (fields or {}).items():
            self.add_field(field_name, value)

    def add_field(
        self,
        name: str,
        value: str | None = None,
        *,
        accessible: bool = True,
        readable: bool = True,
    ) -> None:
        """Add a child field bound to its own attribute.

        An inaccessible field fails when its attribute is looked up; an
        unreadable one fails when its value is read.
        """
        self._controls[name] = InMemoryControl(
            name, InMemoryAttribute(name, value, readable=readable), accessible=accessible
        )

    def set_field_value(self, name: str, value: str | None) -> None:
        """Change the data shown by a child field."""
        attribute = self._controls[name].get_attribute()
        if attribute is not None:
            attribute.set_value(value)

    def is_loaded(self) -> bool:
        self.load_checks += 1
        return self.load_checks > self._loaded_after_checks

    def get_control(self, name: str) -> InMemoryControl | None:
        return self._controls.get(name)

    def get_visible(self) -> bool:
        return self._visible

    def set_visible(self, visible: bool) -> None:
        self._visible = visible


class InMemoryFormSession(FormSession):
    """In-memory form with attributes, controls, panels and banners.

    Keeps an ordered log of every notification set/clear for assertions.
    """

    def __init__(self, session_id: str | None = None) -> None:
        self._session_id = session_id or str(uuid4())
        self._attributes: dict[str, InMemoryAttribute] = {}
        self._controls: dict[str, InMemoryControl] = {}
        self._panels: dict[str, InMemorySummaryPanel] = {}
        self._notifications: dict[str, Notification] = {}
        self.notification_log: list[tuple[str, str]] = []

    @property
    def session_id(self) -> str:
        return self._session_id

    def add_field(
        self,
        name: str,
        value: Any = None,
        *,
        with_control: bool = True,
        visible: bool = True,
        required_level: RequirementLevel = RequirementLevel.NONE,
    ) -> InMemoryAttribute:
        """Add an attribute and, by default, a control bound to it."""
        attribute = InMemoryAttribute(name, value, required_level)
        self._attributes[name] = attribute
        if with_control:
            self._controls[name] = InMemoryControl(name, attribute, visible=visible)
        return attribute

    def add_panel(self, panel: InMemorySummaryPanel) -> InMemorySummaryPanel:
        self._panels[panel.name] = panel
        return panel

    @property
    def notifications(self) -> dict[str, Notification]:
        """Currently shown banners keyed by id."""
        return dict(self._notifications)

    def get_attribute(self, name: str) -> InMemoryAttribute | None:
        return self._attributes.get(name)

    def get_control(self, name: str) -> InMemoryControl | None:
        return self._controls.get(name)

    def get_panel(self, name: str) -> InMemorySummaryPanel | None:
        return self._panels.get(name)

    def set_notification(
        self,
        message: str,
        level: NotificationLevel,
        notification_id: str,
    ) -> None:
        self._notifications[notification_id] = Notification(
            notification_id=notification_id,
            message=message,
            level=level,
        )
        self.notification_log.append(("set", notification_id))

    def clear_notification(self, notification_id: str) -> None:
        self._notifications.pop(notification_id, None)
        self.notification_log.append(("clear", notification_id))
