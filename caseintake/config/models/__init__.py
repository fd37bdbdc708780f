"""Configuration section models."""

from caseintake.config.models.form import FormLayoutConfig, PanelConfig
from caseintake.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from caseintake.config.models.records import RecordServiceConfig
from caseintake.config.models.workflow import WorkflowConfig

__all__ = [
    "FormLayoutConfig",
    "PanelConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "RecordServiceConfig",
    "WorkflowConfig",
]
