"""Contact summary panel: load polling and visibility synchronization."""

from caseintake.panel.poller import PeriodicCheck, PollState
from caseintake.panel.synchronizer import PanelSnapshot, SummaryPanelSynchronizer

__all__ = ["PeriodicCheck", "PollState", "PanelSnapshot", "SummaryPanelSynchronizer"]
