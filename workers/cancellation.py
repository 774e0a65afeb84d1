# =============================================================================
# workers/cancellation.py - Cross-Process Cancel Requests & Task Owners
# =============================================================================
# The API can't reach into a worker's event loop, so a cancel request is a
# Redis key the worker polls while the generation runs:
#
#   API:    request_cancel(task_id)         -> SET brandrider:cancel:<id>
#   Worker: watch_for_cancel(task_id, token) -> token.cancel() when it appears
#
# The key expires with the task result, so stale requests clean themselves up.
#
# The API also records who submitted each task before queueing it, so
# ownership is known even while the task is still waiting for a worker:
#
#   API: record_task_owner(task_id, user_id) -> SET brandrider:owner:<id>
#   API: get_task_owner(task_id)             -> user_id or None
# =============================================================================

import asyncio
import logging

import redis
import redis.asyncio as aioredis

from app.config import settings
from core.progress.cancellation import CANCELLED_MESSAGE, CancelToken

logger = logging.getLogger(__name__)

CANCEL_KEY_PREFIX = "brandrider:cancel:"
OWNER_KEY_PREFIX = "brandrider:owner:"

# Matches CeleryConfig.result_expires
CANCEL_KEY_TTL_SECONDS = 3600
OWNER_KEY_TTL_SECONDS = 3600


def cancel_key(task_id: str) -> str:
    return f"{CANCEL_KEY_PREFIX}{task_id}"


def owner_key(task_id: str) -> str:
    return f"{OWNER_KEY_PREFIX}{task_id}"


def request_cancel(task_id: str, reason: str = CANCELLED_MESSAGE) -> None:
    """
    Ask the worker running task_id to stop after its current step.

    Raises:
        redis.RedisError: If Redis is unreachable
    """
    client = redis.from_url(settings.REDIS_URL)
    try:
        client.set(cancel_key(task_id), reason, ex=CANCEL_KEY_TTL_SECONDS)
    finally:
        client.close()
    logger.info(f"Cancel requested for task {task_id}")


async def watch_for_cancel(
    task_id: str,
    token: CancelToken,
    interval: float | None = None,
) -> None:
    """
    Poll for a cancel request until one arrives or this task is cancelled.

    Redis errors are logged and polling continues; a watcher that can't
    reach Redis must not fail the generation it is watching.
    """
    poll_seconds = interval if interval is not None else settings.CANCEL_POLL_SECONDS
    client = aioredis.from_url(settings.REDIS_URL)
    key = cancel_key(task_id)

    try:
        while not token.cancelled:
            try:
                reason = await client.get(key)
            except redis.RedisError as e:
                logger.warning(f"Cancel check failed for task {task_id}: {e}")
                reason = None

            if reason is not None:
                text = reason.decode() if isinstance(reason, bytes) else str(reason)
                token.cancel(text or CANCELLED_MESSAGE)
                break

            await asyncio.sleep(poll_seconds)
    finally:
        await client.aclose()


def clear_cancel(task_id: str) -> None:
    """Remove a cancel request (after the task has finished)."""
    client = redis.from_url(settings.REDIS_URL)
    try:
        client.delete(cancel_key(task_id))
    except redis.RedisError as e:
        logger.debug(f"Could not clear cancel flag for {task_id}: {e}")
    finally:
        client.close()


# =============================================================================
# Task Ownership
# =============================================================================

def record_task_owner(task_id: str, user_id: str) -> None:
    """
    Remember who submitted task_id. Call before queueing the task.

    Raises:
        redis.RedisError: If Redis is unreachable
    """
    client = redis.from_url(settings.REDIS_URL)
    try:
        client.set(owner_key(task_id), str(user_id), ex=OWNER_KEY_TTL_SECONDS)
    finally:
        client.close()


def get_task_owner(task_id: str) -> str | None:
    """
    user_id that submitted task_id, or None if unknown or Redis is down.

    Callers treat None as "not yours".
    """
    client = redis.from_url(settings.REDIS_URL)
    try:
        owner = client.get(owner_key(task_id))
    except redis.RedisError as e:
        logger.warning(f"Could not look up owner of task {task_id}: {e}")
        return None
    finally:
        client.close()

    if owner is None:
        return None
    return owner.decode() if isinstance(owner, bytes) else str(owner)
