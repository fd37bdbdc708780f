"""Case admission rule.

Server-side check run when a case record is created: a customer may have
at most one active case. Runs independently of the client-side workflow.
"""

from pydantic import ValidationError

from caseintake.admission.models import CaseState, TargetRecord
from caseintake.admission.store import CaseStore
from caseintake.exceptions import ActiveCaseExistsError, MissingCustomerError
from caseintake.form.models import LookupValue
from caseintake.observability.logging import get_logger
from caseintake.observability.metrics import ADMISSION_REJECTIONS

logger = get_logger(__name__)


class CaseAdmissionRule:
    """Rejects creation of a second active case for the same customer."""

    def __init__(
        self,
        case_store: CaseStore,
        *,
        case_type: str = "incident",
        customer_field: str = "customerid",
    ) -> None:
        self._case_store = case_store
        self._case_type = case_type
        self._customer_field = customer_field

    async def validate(self, target: TargetRecord | None) -> None:
        """Validate a record about to be created.

        Targets that are missing or are not case records are ignored.

        Raises:
            MissingCustomerError: If the customer reference is absent or malformed
            ActiveCaseExistsError: If the customer already has an active case
        """
        if target is None or target.logical_name != self._case_type:
            logger.debug("admission_check_skipped")
            return

        customer_id = self._customer_id(target)

        active = await self._case_store.list_by_customer(
            customer_id, state=CaseState.ACTIVE, limit=1
        )
        if active:
            logger.info("admission_rejected_active_case", customer_id=customer_id)
            ADMISSION_REJECTIONS.labels(reason="active_case_exists").inc()
            raise ActiveCaseExistsError(customer_id)

        logger.info("admission_accepted", customer_id=customer_id)

    def _customer_id(self, target: TargetRecord) -> str:
        value = target.attributes.get(self._customer_field)
        if isinstance(value, dict):
            try:
                value = LookupValue.model_validate(value)
            except ValidationError:
                value = None

        if not isinstance(value, LookupValue):
            ADMISSION_REJECTIONS.labels(reason="missing_customer").inc()
            raise MissingCustomerError()

        return value.normalized_id
