# =============================================================================
# app/websocket/broadcast.py - Cross-Process Broadcasting
# =============================================================================
# Provides utilities for Celery workers to publish events that get broadcast
# to WebSocket clients.
#
# Uses Redis pub/sub for cross-process communication:
# - Workers call publish_event() to send events
# - FastAPI subscribes and broadcasts to the user's WebSocket clients
#
# Events:
#   - progress: A generation snapshot (phase, progress, steps)
#   - announcement: A message for screen readers / toasts
#   - task_complete: A background task completed successfully
#   - task_failed: A background task failed
# =============================================================================

import json
import logging
from functools import lru_cache
from typing import Any

import redis

from app.config import settings
from core.models.progress import ProgressSnapshot

logger = logging.getLogger(__name__)

# Redis channel for WebSocket events
WEBSOCKET_CHANNEL = "brandrider:websocket:events"


@lru_cache
def get_redis_client() -> redis.Redis:
    """Get a Redis client for pub/sub operations (one per process)."""
    return redis.from_url(settings.REDIS_URL)


def publish_event(user_id: str, event_type: str, data: dict[str, Any]) -> bool:
    """
    Publish an event that will be broadcast to WebSocket clients.

    This is called from Celery workers to notify the WebSocket server
    of events that should be broadcast to connected clients.

    Args:
        user_id: The user whose connections receive the event
        event_type: Event type (progress, announcement, task_complete, task_failed)
        data: Event data to include

    Returns:
        bool: True if published successfully
    """
    try:
        client = get_redis_client()

        message = json.dumps({
            "user_id": user_id,
            "type": event_type,
            **data
        }, default=str)

        # Publish to Redis channel
        client.publish(WEBSOCKET_CHANNEL, message)

        logger.debug(f"Published {event_type} event for user {user_id}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish event: {e}")
        return False


def publish_progress(user_id: str, task_id: str, snapshot: ProgressSnapshot) -> bool:
    """
    Publish a progress event.

    Called on every pipeline state change.
    """
    return publish_event(
        user_id=user_id,
        event_type="progress",
        data={
            "task_id": task_id,
            **snapshot.model_dump(mode="json"),
        }
    )


def publish_announcement(
    user_id: str,
    message: str,
    priority: str = "polite",
    task_id: str | None = None,
) -> bool:
    """
    Publish an announcement event.

    Clients render these into an aria-live region with the given priority.
    """
    return publish_event(
        user_id=user_id,
        event_type="announcement",
        data={
            "task_id": task_id,
            "message": message,
            "priority": priority,
        }
    )


def publish_task_complete(
    user_id: str,
    task_id: str,
    result: dict[str, Any],
) -> bool:
    """
    Publish a task_complete event.

    Called when a background task completes successfully.
    """
    return publish_event(
        user_id=user_id,
        event_type="task_complete",
        data={
            "task_id": task_id,
            "status": "SUCCESS",
            "result": result,
        }
    )


def publish_task_failed(
    user_id: str,
    task_id: str,
    error: str,
    failed_step: str | None = None,
) -> bool:
    """
    Publish a task_failed event.

    Called when a background task fails.
    """
    return publish_event(
        user_id=user_id,
        event_type="task_failed",
        data={
            "task_id": task_id,
            "status": "FAILURE",
            "error": error,
            "failed_step": failed_step,
        }
    )


class SessionAnnouncer:
    """
    Announcer that forwards messages to one user's WebSocket connections.

    Passed to LoadingState / MultiStepRunner as their announcer callable.

    Example:
        announcer = SessionAnnouncer(user_id, task_id)
        runner = MultiStepRunner(steps, announcer=announcer)
    """

    def __init__(self, user_id: str, task_id: str | None = None):
        self.user_id = user_id
        self.task_id = task_id

    def announce(self, message: str, priority: str = "polite") -> bool:
        """Publish an announcement; never raises."""
        if not message:
            return False
        return publish_announcement(self.user_id, message, priority, task_id=self.task_id)

    def __call__(self, message: str, priority: str = "polite") -> bool:
        return self.announce(message, priority)
