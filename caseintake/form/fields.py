"""Field state controller.

The only path through which the workflow reads or changes lookup values,
control visibility and requirement levels. Every setter is idempotent and
silently skips fields the form layout does not contain.
"""

from typing import Any

from caseintake.form.models import LookupValue, RequirementLevel
from caseintake.form.session import FormSession
from caseintake.observability.logging import get_logger

logger = get_logger(__name__)


class FieldStateController:
    """Visibility, requirement and value mutations on one form session."""

    def __init__(self, session: FormSession) -> None:
        self._session = session

    def set_reference_visible(self, field_name: str, visible: bool) -> None:
        """Show or hide the control of a lookup field."""
        control = self._session.get_control(field_name)
        if control is None:
            logger.debug("control_not_found", field=field_name)
            return
        control.set_visible(visible)

    def set_requirement_level(self, field_name: str, level: RequirementLevel) -> None:
        """Change whether a field must be filled in before saving."""
        attribute = self._session.get_attribute(field_name)
        if attribute is None:
            logger.debug("attribute_not_found", field=field_name)
            return
        attribute.set_required_level(level)

    def set_reference_value(self, field_name: str, value: LookupValue | None) -> None:
        """Set or clear a lookup field."""
        attribute = self._session.get_attribute(field_name)
        if attribute is None:
            logger.debug("attribute_not_found", field=field_name)
            return
        attribute.set_value(value)

    def get_reference_value(self, field_name: str) -> LookupValue | None:
        """Read a lookup field.

        Hosts may hand back a list of lookup entries; only the first entry
        of a single-valued lookup is meaningful. Plain mappings are
        validated into a LookupValue.
        """
        attribute = self._session.get_attribute(field_name)
        if attribute is None:
            logger.debug("attribute_not_found", field=field_name)
            return None

        value: Any = attribute.get_value()
        if isinstance(value, list | tuple):
            value = value[0] if value else None
        if not value:
            return None
        if isinstance(value, LookupValue):
            return value
        return LookupValue.model_validate(value)
