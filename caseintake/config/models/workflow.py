"""Customer resolution workflow configuration."""

from pydantic import BaseModel, Field


class WorkflowConfig(BaseModel):
    """Workflow behaviour switches."""

    discard_stale_results: bool = Field(
        default=False,
        description=(
            "Drop fetch results of a run that was superseded by a newer run "
            "on the same form session"
        ),
    )
