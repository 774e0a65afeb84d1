# =============================================================================
# core/models/progress.py - Progress Schemas
# =============================================================================
# These models describe "what is happening now" for a unit of async work:
# - Phase: coarse state of a LoadingState (idle/loading/success/error)
# - StepStatus: state of one step in a multi-step run
# - Step: one named step (id, label, status, message)
# - ProgressSnapshot: immutable view published to pollers and WebSockets
#
# Step state machine:
#     pending -> loading -> complete
#                       \-> error
#
# Snapshots are what observers see. They are only taken after a change is
# fully applied, so readers never see a half-updated step list.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    """
    Overall phase of a LoadingState.

    - idle: Nothing running (initial state, and after auto-reset)
    - loading: Work in progress
    - success: Last unit of work finished
    - error: Last unit of work failed
    """
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class StepStatus(str, Enum):
    """
    Status of a single step within a pipeline run.

    - pending: Not started (and never will be, if an earlier step failed)
    - loading: Currently running
    - complete: Finished successfully
    - error: Failed; the run stopped here
    """
    PENDING = "pending"
    LOADING = "loading"
    COMPLETE = "complete"
    ERROR = "error"


class Step(BaseModel):
    """
    One named unit of work in a multi-step run.

    Example:
        {
            "id": "style",
            "label": "Style analysis",
            "status": "complete",
            "message": "Writing style analyzed"
        }
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Step identifier, unique within a run"
    )

    label: str = Field(
        ...,
        description="Human-readable step name"
    )

    status: StepStatus = Field(
        default=StepStatus.PENDING,
        description="Current step status"
    )

    message: str | None = Field(
        default=None,
        description="Loading, success or error message for this step"
    )


class ProgressSnapshot(BaseModel):
    """
    Read-only view of a LoadingState (and, for pipelines, its steps).

    Published to Celery task meta for polling and broadcast over WebSockets.

    Example:
        {
            "phase": "loading",
            "message": "Creating visual identity...",
            "error": null,
            "progress": 25.0,
            "steps": [...],
            "current_step_index": 1
        }
    """

    model_config = ConfigDict(frozen=True)

    phase: Phase = Field(
        default=Phase.IDLE,
        description="Overall phase"
    )

    message: str = Field(
        default="",
        description="Current loading or success message"
    )

    error: str | None = Field(
        default=None,
        description="Error message when phase is 'error'"
    )

    progress: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Percent complete (0-100)"
    )

    steps: list[Step] = Field(
        default_factory=list,
        description="Per-step status for multi-step runs"
    )

    current_step_index: int | None = Field(
        default=None,
        ge=0,
        description="Index of the active step (multi-step runs only)"
    )

    @property
    def failed_step(self) -> Step | None:
        """The first step in error, if any."""
        return next((s for s in self.steps if s.status == StepStatus.ERROR), None)
