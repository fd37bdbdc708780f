"""Summary panel synchronizer.

Brings the contact summary panel's visible state into agreement with the
email and phone values it currently holds, once the panel has loaded.
"""

from dataclasses import dataclass

from caseintake.config.models.form import FormLayoutConfig
from caseintake.exceptions import FieldAccessError
from caseintake.form.models import NotificationId
from caseintake.form.notifications import NotificationManager
from caseintake.form.session import FormSession, SummaryPanel
from caseintake.observability.logging import get_logger
from caseintake.observability.metrics import PANEL_POLL_TICKS
from caseintake.panel.poller import PeriodicCheck

logger = get_logger(__name__)


@dataclass(frozen=True)
class PanelSnapshot:
    """Contact details read from a loaded panel; None means absent."""

    email: str | None
    phone: str | None

    @property
    def has_details(self) -> bool:
        return self.email is not None or self.phone is not None


class SummaryPanelSynchronizer:
    """Polls the summary panel until loaded, then derives its visibility.

    One instance may serve many form sessions. A refresh started while an
    earlier refresh of the same session is still polling cancels the
    earlier poll, which then returns without touching the panel.
    """

    def __init__(
        self,
        layout: FormLayoutConfig,
        poll_interval_seconds: float = 0.5,
    ) -> None:
        self._layout = layout
        self._poll_interval_seconds = poll_interval_seconds
        self._active: dict[str, PeriodicCheck] = {}

    def pending(self, session: FormSession) -> bool:
        """Whether a refresh of this session is still waiting for the panel."""
        return session.session_id in self._active

    async def refresh(self, session: FormSession) -> PanelSnapshot | None:
        """Synchronize the panel of one form session.

        Returns:
            The details read, or None when the panel is not on this form
            or the refresh was superseded
        """
        panel = session.get_panel(self._layout.panel_name)
        if panel is None:
            logger.warning("summary_panel_not_found", panel=self._layout.panel_name)
            return None

        session_id = session.session_id
        previous = self._active.pop(session_id, None)
        if previous is not None:
            previous.cancel()

        check = PeriodicCheck(panel.is_loaded, self._poll_interval_seconds)
        self._active[session_id] = check
        try:
            loaded = await check.wait()
        finally:
            if self._active.get(session_id) is check:
                del self._active[session_id]

        if not loaded:
            logger.debug("summary_panel_refresh_superseded", session_id=session_id)
            return None

        PANEL_POLL_TICKS.observe(check.ticks)
        return self._apply(session, panel)

    def _apply(self, session: FormSession, panel: SummaryPanel) -> PanelSnapshot:
        snapshot = PanelSnapshot(
            email=self._read_field(panel, self._layout.email_field),
            phone=self._read_field(panel, self._layout.phone_field),
        )

        self._set_field_visible(panel, self._layout.email_field, snapshot.email is not None)
        self._set_field_visible(panel, self._layout.phone_field, snapshot.phone is not None)
        panel.set_visible(snapshot.has_details)

        notifications = NotificationManager(session)
        if snapshot.has_details:
            notifications.clear(NotificationId.NO_CONTACT_DETAILS)
        else:
            notifications.show(NotificationId.NO_CONTACT_DETAILS)

        logger.info(
            "summary_panel_synchronized",
            panel_visible=snapshot.has_details,
            has_email=snapshot.email is not None,
            has_phone=snapshot.phone is not None,
        )
        return snapshot

    def _read_field(self, panel: SummaryPanel, field_name: str) -> str | None:
        """Read a trimmed text value; missing, unreadable or blank is None."""
        control = panel.get_control(field_name)
        if control is None:
            logger.warning("panel_field_not_found", field=field_name)
            return None

        try:
            attribute = control.get_attribute()
            if attribute is None:
                return None
            value = attribute.get_value()
        except FieldAccessError as e:
            logger.warning("panel_field_inaccessible", field=field_name, error=e.message)
            return None

        if value is None:
            return None
        return str(value).strip() or None

    def _set_field_visible(self, panel: SummaryPanel, field_name: str, visible: bool) -> None:
        control = panel.get_control(field_name)
        if control is None:
            return
        try:
            control.set_visible(visible)
        except FieldAccessError as e:
            logger.warning("panel_field_visibility_failed", field=field_name, error=e.message)
