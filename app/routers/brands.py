# =============================================================================
# app/routers/brands.py - Brand Generation & Retrieval Endpoints
# =============================================================================
# Starts brand generations (as background tasks) and returns saved brands.
# All endpoints require authentication.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID, uuid4

from fastapi import APIRouter, Path, Query, status

from app.dependencies import CurrentUser
from app.config import settings
from app.exceptions import CorpusTooShortError, TaskSubmitError
from core.models.brand import BrandResponse
from core.models.generation import GenerateBrandRequest, GenerationResponse
from core.services.brand_service import BrandService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "/generate",
    response_model=GenerationResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def generate_brand(
    request: GenerateBrandRequest,
    user: CurrentUser,
):
    """
    Start generating a brand from a writing sample.

    The corpus is checked here so obviously short samples fail fast
    instead of in the worker. Follow progress with
    GET /api/v1/tasks/{task_id} or the /ws/users/{user_id} WebSocket.
    """
    corpus_length = len(request.corpus.strip())
    if corpus_length < settings.MIN_CORPUS_CHARS:
        raise CorpusTooShortError(corpus_length, settings.MIN_CORPUS_CHARS)

    task_id = str(uuid4())

    try:
        from workers.cancellation import record_task_owner
        from workers.tasks import generate_brand as generate_brand_task

        # Owner first, so status and cancel checks work while the task is queued
        record_task_owner(task_id, str(user.id))
        generate_brand_task.apply_async(
            args=(request.model_dump(mode="json"), str(user.id)),
            task_id=task_id,
        )

    except Exception as e:
        logger.error(f"Error submitting generation task: {e}")
        raise TaskSubmitError(str(e))

    logger.info(f"Queued brand generation {task_id} for user {user.id}")
    return GenerationResponse(task_id=task_id)


@router.get("/{brand_id}", response_model=BrandResponse)
async def get_brand(
    brand_id: Annotated[UUID, Path(description="Brand UUID")],
    user: CurrentUser,
):
    """
    Get a saved brand.

    User must own the brand; other users' brands look like missing ones.
    """
    row = BrandService.get_brand(brand_id, user_id=user.id)
    return BrandResponse.from_row(row)


@router.get("", response_model=list[BrandResponse])
async def list_brands(
    user: CurrentUser,
    limit: Annotated[int, Query(ge=1, le=100, description="Max brands to return")] = 50,
):
    """List the current user's brands, newest first."""
    rows = BrandService.list_brands(user.id, limit=limit)
    return [BrandResponse.from_row(row) for row in rows]
