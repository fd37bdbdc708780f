"""Prometheus metrics for the case form workflow."""

from prometheus_client import Counter, Histogram, start_http_server

WORKFLOW_RUNS = Counter(
    "caseintake_workflow_runs_total",
    "Customer resolution runs by terminal branch",
    labelnames=["branch"],
)

REMOTE_FETCH_FAILURES = Counter(
    "caseintake_remote_fetch_failures_total",
    "Failed remote record lookups",
    labelnames=["record_type", "reason"],
)

NOTIFICATIONS = Counter(
    "caseintake_notifications_total",
    "Form notifications raised",
    labelnames=["notification_id", "level"],
)

PANEL_POLL_TICKS = Histogram(
    "caseintake_panel_poll_ticks",
    "Poll ticks needed before the summary panel reported loaded",
    buckets=(1, 2, 3, 5, 10, 20, 50, 100),
)

ADMISSION_REJECTIONS = Counter(
    "caseintake_admission_rejections_total",
    "Case creations rejected by the admission rule",
    labelnames=["reason"],
)


def setup_metrics(port: int | None = None) -> None:
    """Expose the default registry over HTTP when a port is given.

    Metrics are registered on import; without a port the hosting
    process is expected to serve the registry itself.
    """
    if port is not None:
        start_http_server(port)
