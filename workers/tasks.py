# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for brand generation.
#
# Tasks:
# - generate_brand: Full pipeline (Style -> Visual -> Document -> [Logo] -> Save)
#
# Progress reaches clients two ways:
# - Celery task meta (state PROGRESS), for GET /api/v1/tasks/{task_id}
# - Redis pub/sub -> WebSocket, for live updates and announcements
# =============================================================================

import asyncio
import contextlib
import logging
from typing import Any

from celery import shared_task, current_task
from celery.exceptions import SoftTimeLimitExceeded

from app.websocket.broadcast import (
    SessionAnnouncer,
    publish_progress,
    publish_task_complete,
    publish_task_failed,
)
from core.models.generation import GenerateBrandRequest, GenerationOutcome
from core.models.progress import ProgressSnapshot
from core.progress.cancellation import CancelToken
from core.workflows.brand_generation import BrandGenerationWorkflow
from workers.cancellation import clear_cancel, watch_for_cancel

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Generation took too long. Please try again."


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(user_id: str, snapshot: ProgressSnapshot) -> None:
    """
    Store the latest snapshot as task meta for polling.

    Args:
        user_id: Owner of the task (checked by the status endpoint)
        snapshot: Current pipeline state
    """
    if current_task:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "user_id": user_id,
                **snapshot.model_dump(mode="json"),
            }
        )


def make_progress_listener(user_id: str, task_id: str):
    """Listener that stores and publishes every snapshot."""

    def on_change(snapshot: ProgressSnapshot) -> None:
        update_progress(user_id, snapshot)
        publish_progress(user_id, task_id, snapshot)

    return on_change


async def run_generation(
    request: GenerateBrandRequest,
    user_id: str,
    task_id: str,
    workflow: BrandGenerationWorkflow,
) -> GenerationOutcome:
    """
    Run the workflow while watching for cancel requests.

    The watcher lives exactly as long as the run.
    """
    token = CancelToken()
    watcher = asyncio.create_task(watch_for_cancel(task_id, token))

    try:
        return await workflow.run(request, user_id, cancel_token=token)
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher


# =============================================================================
# Brand Generation Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.generate_brand")
def generate_brand(
    self,
    request_data: dict[str, Any],
    user_id: str,
) -> dict[str, Any]:
    """
    Generate a brand from a writing corpus.

    Steps:
    1. Analyze writing style
    2. Create visual identity
    3. Assemble the Brand Rider document
    4. (optional) Generate and upload a logo
    5. Save the brand row

    Args:
        request_data: GenerateBrandRequest as a dict
        user_id: Owner of the new brand

    Returns:
        Dict with:
        - success: bool
        - brand_id: New brand UUID (if successful)
        - logo_url: Public logo URL (if generated)
        - steps: Final status of every step
        - error / failed_step: Where and why it stopped (if not successful)
        - user_id: Owner (checked by the status endpoint)
    """
    task_id = self.request.id
    request = GenerateBrandRequest.model_validate(request_data)

    logger.info(f"Generating brand for user {user_id} [{task_id}]")

    # Built here so its OpenAI client belongs to this task's event loop
    workflow = BrandGenerationWorkflow(
        announcer=SessionAnnouncer(user_id, task_id),
        on_change=make_progress_listener(user_id, task_id),
        abort_on=(SoftTimeLimitExceeded,),
    )

    try:
        outcome = asyncio.run(run_generation(request, user_id, task_id, workflow))

    except SoftTimeLimitExceeded:
        logger.warning(f"Brand generation timed out [{task_id}]")
        publish_task_failed(user_id, task_id, TIMEOUT_MESSAGE)
        return {
            "success": False,
            "error": TIMEOUT_MESSAGE,
            "user_id": user_id,
        }

    finally:
        clear_cancel(task_id)

    result = {
        **outcome.model_dump(mode="json"),
        "user_id": user_id,
    }

    if outcome.success:
        publish_task_complete(user_id, task_id, {
            "brand_id": result["brand_id"],
            "logo_url": result["logo_url"],
        })
    else:
        publish_task_failed(user_id, task_id, outcome.error or "Generation failed", outcome.failed_step)

    return result
