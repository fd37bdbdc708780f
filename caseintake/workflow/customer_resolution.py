"""Customer resolution workflow.

Runs whenever the case form loads or its customer lookup changes:

    no customer   -> clear primary contact, refresh panel
    person        -> hide primary contact, make it optional
    organization  -> show primary contact, make it required,
                     fetch the organization's linked person,
                     fetch that person, set primary contact,
                     refresh panel

Fetch failures become call-site specific banners. Anything else is caught
once at the top and becomes the generic load-error banner; nothing is
rolled back. The panel refresh is always the last step of a branch.
"""

import itertools

from caseintake.config.models.form import FormLayoutConfig
from caseintake.config.models.records import RecordServiceConfig
from caseintake.exceptions import RecordFetchError
from caseintake.form.fields import FieldStateController
from caseintake.form.models import (
    CustomerVariant,
    LookupValue,
    NotificationId,
    RequirementLevel,
    normalize_record_id,
)
from caseintake.form.notifications import NotificationManager
from caseintake.form.session import FormSession
from caseintake.observability.logging import get_logger
from caseintake.observability.metrics import REMOTE_FETCH_FAILURES, WORKFLOW_RUNS
from caseintake.panel.synchronizer import SummaryPanelSynchronizer
from caseintake.records.service import RecordService

logger = get_logger(__name__)


class CustomerResolutionWorkflow:
    """Keeps the primary contact and summary panel in step with the customer.

    Overlapping runs on the same session are not serialized. By default the
    last write wins; with discard_stale_results a run that has been
    superseded stops after its next fetch without changing the form.
    """

    def __init__(
        self,
        record_service: RecordService,
        synchronizer: SummaryPanelSynchronizer,
        layout: FormLayoutConfig,
        records: RecordServiceConfig,
        *,
        discard_stale_results: bool = False,
    ) -> None:
        self._records = record_service
        self._synchronizer = synchronizer
        self._layout = layout
        self._record_types = records
        self._discard_stale_results = discard_stale_results
        # Latest generation per session, only while that run is in flight
        self._generations: dict[str, int] = {}
        self._generation_counter = itertools.count(1)

    async def run(self, session: FormSession) -> None:
        """Resolve the customer of one form session. Never raises."""
        session_id = session.session_id
        generation = 0
        if self._discard_stale_results:
            generation = next(self._generation_counter)
            self._generations[session_id] = generation

        try:
            branch = await self._resolve(session, generation)
        except Exception as e:
            logger.error(
                "customer_resolution_failed",
                session_id=session.session_id,
                error=str(e),
                exc_info=True,
            )
            WORKFLOW_RUNS.labels(branch="failed").inc()
            self._notify_load_error(session)
            return
        finally:
            if generation and self._generations.get(session_id) == generation:
                del self._generations[session_id]

        WORKFLOW_RUNS.labels(branch=branch).inc()

    async def _resolve(self, session: FormSession, generation: int) -> str:
        fields = FieldStateController(session)
        customer = fields.get_reference_value(self._layout.customer_field)

        if customer is None:
            logger.info("no_customer_selected")
            fields.set_reference_value(self._layout.contact_field, None)
            await self._synchronizer.refresh(session)
            return "no_customer"

        variant = self._variant_of(customer)
        if variant is CustomerVariant.PERSON:
            fields.set_reference_visible(self._layout.contact_field, False)
            fields.set_requirement_level(self._layout.contact_field, RequirementLevel.NONE)
            return "person"

        if variant is None:
            logger.warning("unsupported_customer_type", entity_type=customer.entity_type)
            return "unsupported"

        return await self._resolve_organization(
            session, fields, customer.normalized_id, generation
        )

    async def _resolve_organization(
        self,
        session: FormSession,
        fields: FieldStateController,
        organization_id: str,
        generation: int,
    ) -> str:
        notifications = NotificationManager(session)
        fields.set_reference_visible(self._layout.contact_field, True)
        fields.set_requirement_level(self._layout.contact_field, RequirementLevel.REQUIRED)

        linked_field = self._record_types.linked_person_field
        try:
            organization = await self._records.fetch(
                self._record_types.organization_type,
                organization_id,
                [linked_field],
            )
        except RecordFetchError as e:
            self._record_fetch_failure(e)
            if self._is_stale(session, generation):
                return "stale"
            notifications.show(NotificationId.ACCOUNT_ERROR)
            await self._synchronizer.refresh(session)
            return "account_error"

        if self._is_stale(session, generation):
            return "stale"

        linked_person = organization.get(linked_field)
        if not linked_person:
            logger.warning("no_primary_contact", organization_id=organization_id)
            notifications.show(NotificationId.NO_PRIMARY_CONTACT)
            await self._synchronizer.refresh(session)
            return "no_primary_contact"

        person_id = normalize_record_id(str(linked_person))
        display_name_field = self._record_types.display_name_field
        try:
            person = await self._records.fetch(
                self._record_types.person_type,
                person_id,
                [self._layout.email_field, self._layout.phone_field, display_name_field],
            )
        except RecordFetchError as e:
            self._record_fetch_failure(e)
            if self._is_stale(session, generation):
                return "stale"
            notifications.show(NotificationId.CONTACT_ERROR)
            await self._synchronizer.refresh(session)
            return "contact_error"

        if self._is_stale(session, generation):
            return "stale"

        logger.info("primary_contact_resolved", organization_id=organization_id, contact_id=person_id)
        fields.set_reference_value(
            self._layout.contact_field,
            LookupValue(
                id=person_id,
                name=person.get(display_name_field),
                entity_type=self._record_types.person_type,
            ),
        )
        await self._synchronizer.refresh(session)
        return "organization"

    def _variant_of(self, customer: LookupValue) -> CustomerVariant | None:
        if customer.entity_type == self._record_types.organization_type:
            return CustomerVariant.ORGANIZATION
        if customer.entity_type == self._record_types.person_type:
            return CustomerVariant.PERSON
        return None

    def _is_stale(self, session: FormSession, generation: int) -> bool:
        if not self._discard_stale_results:
            return False
        if self._generations.get(session.session_id) == generation:
            return False
        logger.info("stale_result_discarded", session_id=session.session_id, generation=generation)
        return True

    def _record_fetch_failure(self, error: RecordFetchError) -> None:
        logger.error(
            "record_fetch_failed",
            record_type=error.record_type,
            record_id=error.record_id,
            error_code=error.error_code.value,
            error=error.message,
        )
        REMOTE_FETCH_FAILURES.labels(record_type=error.record_type, reason=error.reason).inc()

    def _notify_load_error(self, session: FormSession) -> None:
        try:
            NotificationManager(session).show(NotificationId.LOAD_ERROR)
        except Exception as e:
            # Last line before the host event handler; report and stop here
            logger.error("load_error_notification_failed", error=str(e))
