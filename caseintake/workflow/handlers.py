"""Case form event handlers.

The form host calls these on form load and when the customer lookup
changes. Neither handler lets an exception reach the host.
"""

from caseintake.form.models import NotificationId, NotificationLevel
from caseintake.form.notifications import NotificationManager
from caseintake.form.session import FormSession
from caseintake.observability.logging import get_logger
from caseintake.workflow.customer_resolution import CustomerResolutionWorkflow

logger = get_logger(__name__)


class CaseFormHandlers:
    """Entry points wired to the case form's load and change events."""

    def __init__(
        self,
        workflow: CustomerResolutionWorkflow,
        load_banner_message: str | None = None,
    ) -> None:
        self._workflow = workflow
        self._load_banner_message = load_banner_message

    async def on_load(self, session: FormSession) -> None:
        """Show the load banner, if configured, then resolve the customer."""
        if self._load_banner_message:
            try:
                NotificationManager(session).notify(
                    self._load_banner_message,
                    NotificationLevel.INFO,
                    NotificationId.FORM_LOAD_BANNER,
                )
            except Exception as e:
                logger.error("form_load_banner_failed", error=str(e))

        await self._workflow.run(session)

    async def on_customer_change(self, session: FormSession) -> None:
        """Resolve the customer again after the user picked a new one."""
        await self._workflow.run(session)
