# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Provides endpoints for checking and cancelling background generations.
#
# Celery states map to TaskState:
#   PENDING -> queued, STARTED/PROGRESS -> processing, REVOKED -> cancelled,
#   SUCCESS -> done / failed / cancelled (from the outcome), FAILURE -> failed
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Path
from pydantic import BaseModel

from app.auth import AuthUser
from app.dependencies import CurrentUser
from app.exceptions import TaskNotFoundError, TaskSubmitError
from core.models.generation import GenerationTaskStatus, TaskState
from core.models.progress import Step

logger = logging.getLogger(__name__)

router = APIRouter()

FINISHED_STATES = {"SUCCESS", "FAILURE", "REVOKED"}


# =============================================================================
# Response Models
# =============================================================================

class TaskCancelResponse(BaseModel):
    """Response model for task cancellation."""
    task_id: str
    cancelled: bool
    message: str


# =============================================================================
# Helpers
# =============================================================================

def _task_owner(task_id: str, result) -> str | None:
    """
    user_id recorded in progress meta or the final result, else the owner
    recorded at submit time (queued and just-started tasks have no meta).
    """
    from workers.cancellation import get_task_owner

    info = result.info if isinstance(result.info, dict) else None
    if info and info.get("user_id"):
        return info["user_id"]
    return get_task_owner(task_id)


def _check_owner(task_id: str, result, user: AuthUser) -> None:
    """Unknown owners are denied; other users' tasks look missing."""
    if _task_owner(task_id, result) != str(user.id):
        raise TaskNotFoundError(task_id)


def build_task_status(task_id: str, state: str, info: Any) -> GenerationTaskStatus:
    """Translate a Celery state and its info/result into a GenerationTaskStatus."""
    data = info if isinstance(info, dict) else {}
    steps = [Step.model_validate(s) for s in data.get("steps") or []]

    if state == "PENDING":
        return GenerationTaskStatus(
            task_id=task_id,
            status=TaskState.QUEUED,
            message="Waiting in queue...",
        )

    if state == "STARTED":
        return GenerationTaskStatus(
            task_id=task_id,
            status=TaskState.PROCESSING,
            message="Starting...",
        )

    if state == "PROGRESS":
        return GenerationTaskStatus(
            task_id=task_id,
            status=TaskState.PROCESSING,
            progress=data.get("progress", 0.0),
            message=data.get("message") or "Processing...",
            steps=steps,
            error=data.get("error"),
        )

    if state == "SUCCESS":
        if data.get("success"):
            return GenerationTaskStatus(
                task_id=task_id,
                status=TaskState.DONE,
                progress=100.0,
                message="Complete",
                steps=steps,
                result={"brand_id": data.get("brand_id"), "logo_url": data.get("logo_url")},
            )
        return GenerationTaskStatus(
            task_id=task_id,
            status=TaskState.CANCELLED if data.get("cancelled") else TaskState.FAILED,
            message="Cancelled" if data.get("cancelled") else "Failed",
            steps=steps,
            error=data.get("error"),
        )

    if state == "REVOKED":
        return GenerationTaskStatus(
            task_id=task_id,
            status=TaskState.CANCELLED,
            message="Cancelled",
        )

    # FAILURE (an unexpected exception in the worker) and unknown states
    return GenerationTaskStatus(
        task_id=task_id,
        status=TaskState.FAILED,
        message="Failed",
        error=str(info) if info else "Unknown error",
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=GenerationTaskStatus)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")],
    user: CurrentUser,
):
    """
    Get the status of a brand generation.

    While running, includes the overall progress, current message and
    the status of every step. Once done, result holds the brand_id.
    """
    from workers.celery_app import celery_app

    result = celery_app.AsyncResult(task_id)
    _check_owner(task_id, result, user)

    return build_task_status(task_id, result.state, result.info)


@router.delete("/{task_id}", response_model=TaskCancelResponse)
async def cancel_task(
    task_id: Annotated[str, Path(description="Celery task ID")],
    user: CurrentUser,
):
    """
    Cancel a queued or running generation.

    A queued task is revoked. A running task stops before its next step;
    the step it is on finishes first and nothing is saved.
    """
    from workers.celery_app import celery_app
    from workers.cancellation import request_cancel

    result = celery_app.AsyncResult(task_id)
    _check_owner(task_id, result, user)

    if result.state in FINISHED_STATES:
        return TaskCancelResponse(
            task_id=task_id,
            cancelled=False,
            message=f"Task already {result.state.lower()}, cannot cancel",
        )

    try:
        if result.state == "PENDING":
            result.revoke()
        request_cancel(task_id)
    except Exception as e:
        logger.error(f"Error cancelling task {task_id}: {e}")
        raise TaskSubmitError(str(e), action="cancel task")

    return TaskCancelResponse(
        task_id=task_id,
        cancelled=True,
        message="Cancellation requested",
    )
