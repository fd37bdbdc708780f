"""Notification manager: form banners keyed by stable identifiers."""

from caseintake.form.models import NotificationId, NotificationLevel
from caseintake.form.session import FormSession
from caseintake.observability.logging import get_logger
from caseintake.observability.metrics import NOTIFICATIONS

logger = get_logger(__name__)

# Banner text and severity for every identifier the case form raises
MESSAGES: dict[NotificationId, tuple[str, NotificationLevel]] = {
    NotificationId.LOAD_ERROR: (
        "An error occurred. Please reload the form or contact an administrator.",
        NotificationLevel.ERROR,
    ),
    NotificationId.ACCOUNT_ERROR: (
        "Unable to retrieve account details. Please try again later.",
        NotificationLevel.ERROR,
    ),
    NotificationId.CONTACT_ERROR: (
        "Unable to retrieve contact details. Please try again later.",
        NotificationLevel.ERROR,
    ),
    NotificationId.NO_PRIMARY_CONTACT: (
        "No primary contact is associated with this account.",
        NotificationLevel.WARNING,
    ),
    NotificationId.NO_CONTACT_DETAILS: (
        "No contact details are available to display.",
        NotificationLevel.WARNING,
    ),
}


class NotificationManager:
    """Upserts and clears banners on a form session.

    Last write wins per identifier; clearing an absent identifier is a no-op.
    """

    def __init__(self, session: FormSession) -> None:
        self._session = session

    def notify(
        self,
        message: str,
        level: NotificationLevel,
        notification_id: str | NotificationId,
    ) -> None:
        """Show a banner, replacing any banner with the same id."""
        notification_id = _as_str(notification_id)
        self._session.set_notification(message, level, notification_id)
        NOTIFICATIONS.labels(notification_id=notification_id, level=level.value).inc()
        logger.info("notification_set", notification_id=notification_id, level=level.value)

    def show(self, notification_id: NotificationId) -> None:
        """Show one of the predefined case form banners."""
        message, level = MESSAGES[notification_id]
        self.notify(message, level, notification_id)

    def clear(self, notification_id: str | NotificationId) -> None:
        """Remove a banner if it is shown."""
        notification_id = _as_str(notification_id)
        self._session.clear_notification(notification_id)
        logger.debug("notification_cleared", notification_id=notification_id)


def _as_str(notification_id: str | NotificationId) -> str:
    if isinstance(notification_id, NotificationId):
        return notification_id.value
    return notification_id
