# =============================================================================
# core/models/generation.py - Generation Request & Task Schemas
# =============================================================================
# These models define the API contract for brand generation:
# - GenerateBrandRequest: User submits a corpus and options
# - GenerationResponse: Immediate response with task ID for polling
# - GenerationTaskStatus: Progress of the background task (with steps)
# - GenerationOutcome: What a workflow run returns
#
# Flow:
# 1. User sends GenerateBrandRequest -> gets GenerationResponse with task_id
# 2. User polls GET /tasks/{task_id} (or listens on the WebSocket)
# 3. When status="done", result includes the new brand_id
# =============================================================================

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .brand import PresentationFormat
from .progress import ProgressSnapshot, Step


class TaskState(str, Enum):
    """
    Possible states for a generation task.

    State machine:
        queued -> processing -> done
                             -> failed
                             -> cancelled
    """
    QUEUED = "queued"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class GenerateBrandRequest(BaseModel):
    """
    Schema for starting a brand generation.

    Example:
        {
            "corpus": "I build products that ship...",
            "upload_ids": ["2b0e..."],
            "format": "executive",
            "role_tags": ["founder", "speaker"],
            "generate_logo": true
        }
    """

    # The user's writing (pasted text or text extracted from uploads)
    corpus: str = Field(
        ...,
        min_length=1,
        description="Writing sample to analyze"
    )

    upload_ids: list[str] = Field(
        default_factory=list,
        description="IDs of uploads the corpus was extracted from"
    )

    format: PresentationFormat = Field(
        default=PresentationFormat.CUSTOM,
        description="Presentation format for the Brand Rider"
    )

    role_tags: list[str] = Field(
        default_factory=list,
        max_length=20,
        description="Roles the user identifies with (e.g. 'founder')"
    )

    generate_logo: bool = Field(
        default=False,
        description="Also generate and store a logo image"
    )

    @field_validator("format", mode="before")
    @classmethod
    def parse_format(cls, v: Any) -> PresentationFormat:
        """Unknown formats fall back to 'custom'."""
        return PresentationFormat.parse(v)


class GenerationResponse(BaseModel):
    """
    Immediate response after submitting a generation.

    Example:
        {
            "task_id": "c1f0...",
            "status": "queued",
            "message": "Your brand is being generated"
        }
    """

    task_id: str = Field(..., description="Task ID for polling status")

    status: TaskState = Field(
        default=TaskState.QUEUED,
        description="Current task status"
    )

    message: str = Field(
        default="Your brand is being generated",
        description="Status message"
    )


class GenerationTaskStatus(BaseModel):
    """
    Status of a generation task, returned by GET /tasks/{task_id}.

    Example (in progress):
        {
            "task_id": "c1f0...",
            "status": "processing",
            "progress": 25.0,
            "message": "Creating visual identity...",
            "steps": [{"id": "style", "status": "complete", ...}, ...]
        }
    """

    task_id: str
    status: TaskState
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    message: str | None = None
    steps: list[Step] = Field(default_factory=list)
    result: dict[str, Any] | None = None
    error: str | None = None


class GenerationOutcome(BaseModel):
    """
    Result of one BrandGenerationWorkflow run.

    success is True only when every step completed and the brand row
    was written; brand_id is set in that case.
    """

    success: bool
    brand_id: UUID | None = None
    logo_url: str | None = None
    steps: list[Step] = Field(default_factory=list)
    error: str | None = None
    failed_step: str | None = None
    cancelled: bool = False

    @classmethod
    def from_snapshot(
        cls,
        snapshot: ProgressSnapshot,
        success: bool,
        brand_id: UUID | str | None = None,
        logo_url: str | None = None,
        cancelled: bool = False,
    ) -> "GenerationOutcome":
        failed = snapshot.failed_step
        return cls(
            success=success,
            brand_id=brand_id if success else None,
            logo_url=logo_url if success else None,
            steps=snapshot.steps,
            error=failed.message if failed else None,
            failed_step=failed.id if failed else None,
            cancelled=cancelled and not success,
        )
