"""Wiring for the case form components.

Example usage:

    from caseintake.bootstrap import build_handlers

    handlers = build_handlers()
    await handlers.on_load(session)
"""

from caseintake.admission.rule import CaseAdmissionRule
from caseintake.admission.store import CaseStore
from caseintake.config import Settings, get_settings
from caseintake.observability.logging import get_logger, setup_logging
from caseintake.observability.metrics import setup_metrics
from caseintake.panel.synchronizer import SummaryPanelSynchronizer
from caseintake.records.service import RecordService
from caseintake.records.webapi import WebApiRecordService
from caseintake.workflow.customer_resolution import CustomerResolutionWorkflow
from caseintake.workflow.handlers import CaseFormHandlers

logger = get_logger(__name__)


def configure_observability(settings: Settings) -> None:
    """Set up logging and, when enabled, metrics exposure."""
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )
    metrics_config = settings.observability.metrics
    if metrics_config.enabled:
        setup_metrics(metrics_config.port)


def build_workflow(
    settings: Settings,
    record_service: RecordService | None = None,
) -> CustomerResolutionWorkflow:
    """Create the customer resolution workflow from settings.

    Args:
        settings: Loaded configuration
        record_service: Record service to use; defaults to the Web API service
    """
    if record_service is None:
        record_service = WebApiRecordService(settings.records)

    synchronizer = SummaryPanelSynchronizer(
        settings.form,
        poll_interval_seconds=settings.panel.poll_interval_seconds,
    )
    return CustomerResolutionWorkflow(
        record_service,
        synchronizer,
        settings.form,
        settings.records,
        discard_stale_results=settings.workflow.discard_stale_results,
    )


def build_handlers(
    settings: Settings | None = None,
    record_service: RecordService | None = None,
    *,
    configure: bool = True,
) -> CaseFormHandlers:
    """Create the case form event handlers.

    Args:
        settings: Configuration (default: loaded via get_settings())
        record_service: Record service to use; defaults to the Web API service
        configure: Whether to set up logging and metrics
    """
    settings = settings or get_settings()
    if configure:
        configure_observability(settings)

    handlers = CaseFormHandlers(
        build_workflow(settings, record_service),
        load_banner_message=settings.form.load_banner_message,
    )
    logger.info("case_form_handlers_ready", app_name=settings.app_name)
    return handlers


def build_admission_rule(settings: Settings, case_store: CaseStore) -> CaseAdmissionRule:
    """Create the case admission rule from settings."""
    return CaseAdmissionRule(
        case_store,
        case_type=settings.records.case_type,
        customer_field=settings.form.customer_field,
    )
