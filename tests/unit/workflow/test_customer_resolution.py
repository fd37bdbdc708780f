"""Tests for CustomerResolutionWorkflow."""

import asyncio
from collections.abc import Sequence
from typing import Any

import pytest
from prometheus_client import REGISTRY

from caseintake.exceptions import TransientFetchError
from caseintake.form.inmemory import InMemoryFormSession
from caseintake.form.models import LookupValue, NotificationLevel, RequirementLevel
from caseintake.panel.synchronizer import SummaryPanelSynchronizer
from caseintake.records.inmemory import InMemoryRecordService
from caseintake.records.service import RecordService
from caseintake.workflow.customer_resolution import CustomerResolutionWorkflow
from tests.factories import LAYOUT, RECORDS, CaseFormFactory, RecordServiceFactory

PAT = {"emailaddress1": "e@x.com", "mobilephone": "", "fullname": "Pat Doe"}


class ExplodingRecordService(RecordService):
    """Record service failing with an error nobody expects."""

    async def fetch(self, record_type: str, record_id: str, fields: Sequence[str]) -> dict[str, Any]:
        raise RuntimeError("socket exploded")


class GatedRecordService(InMemoryRecordService):
    """In-memory service whose lookups of chosen ids wait for a gate."""

    def __init__(self) -> None:
        super().__init__()
        self.gates: dict[str, asyncio.Event] = {}

    async def fetch(self, record_type: str, record_id: str, fields: Sequence[str]) -> dict[str, Any]:
        gate = self.gates.get(record_id)
        if gate is not None:
            await gate.wait()
        return await super().fetch(record_type, record_id, fields)


def make_workflow(
    service: RecordService,
    synchronizer: SummaryPanelSynchronizer,
    **kwargs: Any,
) -> CustomerResolutionWorkflow:
    return CustomerResolutionWorkflow(service, synchronizer, LAYOUT, RECORDS, **kwargs)


def contact_of(session: InMemoryFormSession) -> Any:
    return session.get_attribute(LAYOUT.contact_field).get_value()


def contact_visible(session: InMemoryFormSession) -> bool:
    return session.get_control(LAYOUT.contact_field).get_visible()


def contact_required(session: InMemoryFormSession) -> RequirementLevel:
    return session.get_attribute(LAYOUT.contact_field).get_required_level()


def runs(branch: str) -> float:
    return REGISTRY.get_sample_value("caseintake_workflow_runs_total", {"branch": branch}) or 0.0


def called(service: InMemoryRecordService) -> list[tuple[str, str]]:
    return [(call["record_type"], call["record_id"]) for call in service.call_history]


class TestPersonCustomer:
    """Tests for a person selected as customer."""

    @pytest.mark.asyncio
    async def test_hides_primary_contact_without_fetching(
        self, synchronizer: SummaryPanelSynchronizer
    ) -> None:
        """Contact field is hidden and optional; nothing is fetched."""
        service = RecordServiceFactory.create()
        session = CaseFormFactory.create(
            customer=CaseFormFactory.person(),
            contact_required=RequirementLevel.REQUIRED,
        )
        before = runs("person")

        await make_workflow(service, synchronizer).run(session)

        assert service.call_history == []
        assert contact_visible(session) is False
        assert contact_required(session) == RequirementLevel.NONE
        assert session.notifications == {}
        assert runs("person") == before + 1

    @pytest.mark.asyncio
    async def test_panel_not_refreshed(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """The person branch leaves the summary panel alone."""
        session = CaseFormFactory.create(customer=CaseFormFactory.person())

        await make_workflow(RecordServiceFactory.create(), synchronizer).run(session)

        assert session.get_panel(LAYOUT.panel_name).load_checks == 0


class TestOrganizationCustomer:
    """Tests for an organization selected as customer."""

    @pytest.mark.asyncio
    async def test_sets_primary_contact(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """Linked person becomes the primary contact, fetched in order."""
        service = RecordServiceFactory.create({"A1": "P1"}, {"P1": PAT})
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A1"))
        before = runs("organization")

        await make_workflow(service, synchronizer).run(session)

        assert called(service) == [("account", "A1"), ("contact", "P1")]
        assert service.call_history[0]["fields"] == ["_primarycontactid_value"]
        assert set(service.call_history[1]["fields"]) == {"emailaddress1", "mobilephone", "fullname"}
        assert contact_of(session) == LookupValue(id="P1", name="Pat Doe", entity_type="contact")
        assert contact_visible(session) is True
        assert contact_required(session) == RequirementLevel.REQUIRED
        assert runs("organization") == before + 1

    @pytest.mark.asyncio
    async def test_panel_synchronized_after_contact_set(
        self, synchronizer: SummaryPanelSynchronizer
    ) -> None:
        """Panel is polled only once the primary contact holds P1."""
        service = RecordServiceFactory.create({"A1": "P1"}, {"P1": PAT})
        session = CaseFormFactory.create(
            customer=CaseFormFactory.organization("A1"),
            email="e@x.com",
            phone="",
            loaded_after_checks=2,
        )
        panel = session.get_panel(LAYOUT.panel_name)
        contact_during_poll: list[Any] = []
        is_loaded = panel.is_loaded

        def recording_is_loaded() -> bool:
            contact_during_poll.append(contact_of(session))
            return is_loaded()

        panel.is_loaded = recording_is_loaded

        await make_workflow(service, synchronizer).run(session)

        assert contact_during_poll
        assert all(contact.id == "P1" for contact in contact_during_poll)
        assert panel.get_visible() is True
        assert panel.get_control(LAYOUT.email_field).get_visible() is True
        assert panel.get_control(LAYOUT.phone_field).get_visible() is False
        assert "NoContactDetails" not in session.notifications

    @pytest.mark.asyncio
    async def test_unreadable_panel_field_is_not_an_error(
        self, synchronizer: SummaryPanelSynchronizer
    ) -> None:
        """A panel value that cannot be read never reaches the generic banner."""
        service = RecordServiceFactory.create({"A1": "P1"}, {"P1": PAT})
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A1"))
        panel = session.get_panel(LAYOUT.panel_name)
        panel.add_field(LAYOUT.email_field, "e@x.com", readable=False)
        panel.add_field(LAYOUT.phone_field, "555 0100")

        await make_workflow(service, synchronizer).run(session)

        assert "ErrorNotification" not in session.notifications
        assert panel.get_visible() is True
        assert panel.get_control(LAYOUT.phone_field).get_visible() is True

    @pytest.mark.asyncio
    async def test_braced_ids_normalized(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """Braces around ids are stripped before fetching and setting."""
        service = RecordServiceFactory.create({"A1": "{P1}"}, {"P1": PAT})
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("{A1}"))

        await make_workflow(service, synchronizer).run(session)

        assert called(service) == [("account", "A1"), ("contact", "P1")]
        assert contact_of(session).id == "P1"

    @pytest.mark.asyncio
    async def test_list_valued_customer(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """A lookup handed back as a list uses its first entry."""
        service = RecordServiceFactory.create({"A1": "P1"}, {"P1": PAT})
        session = CaseFormFactory.create(customer=[CaseFormFactory.organization("A1")])

        await make_workflow(service, synchronizer).run(session)

        assert contact_of(session).id == "P1"

    @pytest.mark.asyncio
    async def test_no_linked_person(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """Missing linked person shows a warning; contact stays required."""
        service = RecordServiceFactory.create({"A2": None})
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A2"))

        await make_workflow(service, synchronizer).run(session)

        assert called(service) == [("account", "A2")]
        notification = session.notifications["NoPrimaryContact"]
        assert notification.level == NotificationLevel.WARNING
        assert contact_of(session) is None
        assert contact_visible(session) is True
        assert contact_required(session) == RequirementLevel.REQUIRED
        assert session.get_panel(LAYOUT.panel_name).load_checks > 0


class TestFetchFailures:
    """Tests for remote lookup failures."""

    @pytest.mark.asyncio
    async def test_organization_lookup_failure(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """Account error banner; no person lookup; contact stays required."""
        service = RecordServiceFactory.create({"A1": "P1"}, {"P1": PAT})
        service.fail_with("account", "A1", TransientFetchError("down", "account", "A1"))
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A1"))
        before = runs("account_error")

        await make_workflow(service, synchronizer).run(session)

        assert called(service) == [("account", "A1")]
        assert session.notifications["AccountError"].level == NotificationLevel.ERROR
        assert contact_visible(session) is True
        assert contact_required(session) == RequirementLevel.REQUIRED
        assert session.get_panel(LAYOUT.panel_name).load_checks > 0
        assert runs("account_error") == before + 1

    @pytest.mark.asyncio
    async def test_unknown_organization(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """A missing organization record is an account error too."""
        service = RecordServiceFactory.create()
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A9"))

        await make_workflow(service, synchronizer).run(session)

        assert "AccountError" in session.notifications
        assert "ErrorNotification" not in session.notifications

    @pytest.mark.asyncio
    async def test_person_lookup_failure(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """Contact error banner; primary contact left unset."""
        service = RecordServiceFactory.create({"A1": "P1"})
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A1"))

        await make_workflow(service, synchronizer).run(session)

        assert called(service) == [("account", "A1"), ("contact", "P1")]
        assert "ContactError" in session.notifications
        assert contact_of(session) is None
        assert session.get_panel(LAYOUT.panel_name).load_checks > 0

    @pytest.mark.asyncio
    async def test_unexpected_error_shows_generic_banner(
        self, synchronizer: SummaryPanelSynchronizer
    ) -> None:
        """Unexpected errors become the load-error banner and do not escape."""
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A1"))
        before = runs("failed")

        await make_workflow(ExplodingRecordService(), synchronizer).run(session)

        assert session.notifications["ErrorNotification"].level == NotificationLevel.ERROR
        assert runs("failed") == before + 1

    @pytest.mark.asyncio
    async def test_malformed_customer_value(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """A customer value that is not a lookup is an unexpected error."""
        session = CaseFormFactory.create(customer={"id": "", "entity_type": "account"})

        await make_workflow(RecordServiceFactory.create(), synchronizer).run(session)

        assert "ErrorNotification" in session.notifications

    @pytest.mark.asyncio
    async def test_failing_banner_does_not_escape(
        self, synchronizer: SummaryPanelSynchronizer
    ) -> None:
        """Even a form that cannot show banners does not see an exception."""

        class BrokenBanners(InMemoryFormSession):
            def set_notification(self, message, level, notification_id) -> None:
                raise RuntimeError("banner area gone")

        session = BrokenBanners()
        session.add_field(LAYOUT.customer_field, CaseFormFactory.organization("A1"))
        session.add_field(LAYOUT.contact_field)

        await make_workflow(ExplodingRecordService(), synchronizer).run(session)


class TestNoCustomer:
    """Tests for a cleared customer lookup."""

    @pytest.mark.asyncio
    async def test_clears_contact_and_refreshes_panel(
        self, synchronizer: SummaryPanelSynchronizer
    ) -> None:
        """Primary contact is cleared, then the panel is synchronized."""
        service = RecordServiceFactory.create()
        session = CaseFormFactory.create(contact=CaseFormFactory.person("P9"))

        await make_workflow(service, synchronizer).run(session)

        assert service.call_history == []
        assert contact_of(session) is None
        panel = session.get_panel(LAYOUT.panel_name)
        assert panel.load_checks > 0
        assert panel.get_visible() is False
        assert "NoContactDetails" in session.notifications

    @pytest.mark.asyncio
    async def test_form_without_panel(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """A form lacking the panel still completes quietly."""
        session = CaseFormFactory.create(with_panel=False)

        await make_workflow(RecordServiceFactory.create(), synchronizer).run(session)

        assert session.notifications == {}


class TestUnsupportedCustomer:
    """Tests for customer lookups of other record types."""

    @pytest.mark.asyncio
    async def test_ignored(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """Nothing is fetched and the form is not changed."""
        service = RecordServiceFactory.create()
        session = CaseFormFactory.create(
            customer=LookupValue(id="U1", entity_type="systemuser"),
            contact=CaseFormFactory.person("P9"),
        )

        await make_workflow(service, synchronizer).run(session)

        assert service.call_history == []
        assert contact_of(session).id == "P9"
        assert contact_visible(session) is True
        assert session.notifications == {}


class TestOverlappingRuns:
    """Tests for a customer change while an earlier run is still fetching."""

    async def _overlap(
        self, synchronizer: SummaryPanelSynchronizer, **kwargs: Any
    ) -> InMemoryFormSession:
        service = GatedRecordService()
        service.add_record("account", "A1", _primarycontactid_value="P1")
        service.add_record("account", "A2", _primarycontactid_value="P2")
        service.add_record("contact", "P1", fullname="First")
        service.add_record("contact", "P2", fullname="Second")
        service.gates["A1"] = asyncio.Event()

        workflow = make_workflow(service, synchronizer, **kwargs)
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A1"))

        first = asyncio.create_task(workflow.run(session))
        await asyncio.sleep(0)

        session.get_attribute(LAYOUT.customer_field).set_value(CaseFormFactory.organization("A2"))
        await workflow.run(session)
        assert contact_of(session).id == "P2"

        service.gates["A1"].set()
        await first
        return session

    @pytest.mark.asyncio
    async def test_last_write_wins_by_default(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """Without the guard the slower run overwrites the newer result."""
        session = await self._overlap(synchronizer)

        assert contact_of(session).id == "P1"

    @pytest.mark.asyncio
    async def test_stale_results_discarded(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """With the guard the superseded run leaves the form alone."""
        before = runs("stale")

        session = await self._overlap(synchronizer, discard_stale_results=True)

        assert contact_of(session).id == "P2"
        assert runs("stale") == before + 1

    @pytest.mark.asyncio
    async def test_generations_released_after_overlap(
        self, synchronizer: SummaryPanelSynchronizer
    ) -> None:
        """No generation is kept once both overlapping runs have finished."""
        service = GatedRecordService()
        service.add_record("account", "A1", _primarycontactid_value=None)
        service.gates["A1"] = asyncio.Event()
        workflow = make_workflow(service, synchronizer, discard_stale_results=True)
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A1"))

        first = asyncio.create_task(workflow.run(session))
        await asyncio.sleep(0)
        session.get_attribute(LAYOUT.customer_field).set_value(None)
        await workflow.run(session)
        service.gates["A1"].set()
        await first

        assert workflow._generations == {}


class TestGenerationTracking:
    """Tests for per-session bookkeeping on a long-lived workflow."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("discard_stale_results", [False, True])
    async def test_nothing_retained_per_session(
        self, synchronizer: SummaryPanelSynchronizer, discard_stale_results: bool
    ) -> None:
        """Finished runs leave no per-session state behind."""
        workflow = make_workflow(
            RecordServiceFactory.create(),
            synchronizer,
            discard_stale_results=discard_stale_results,
        )

        for _ in range(50):
            await workflow.run(CaseFormFactory.create(customer=CaseFormFactory.person()))

        assert workflow._generations == {}

    @pytest.mark.asyncio
    async def test_released_after_failure(self, synchronizer: SummaryPanelSynchronizer) -> None:
        """A run ending in the generic banner also releases its generation."""
        workflow = make_workflow(ExplodingRecordService(), synchronizer, discard_stale_results=True)
        session = CaseFormFactory.create(customer=CaseFormFactory.organization("A1"))

        await workflow.run(session)

        assert "ErrorNotification" in session.notifications
        assert workflow._generations == {}
