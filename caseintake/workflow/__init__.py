"""Customer resolution workflow and the form events that trigger it."""

from caseintake.workflow.customer_resolution import CustomerResolutionWorkflow
from caseintake.workflow.handlers import CaseFormHandlers

__all__ = ["CustomerResolutionWorkflow", "CaseFormHandlers"]
