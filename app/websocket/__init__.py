# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Provides real-time generation updates per user.
#
# Usage:
#   # Broadcast to all of a user's connections (from FastAPI)
#   from app.websocket import websocket_manager
#   await websocket_manager.broadcast(user_id, {"type": "progress", ...})
#
#   # Publish events from Celery workers
#   from app.websocket.broadcast import publish_progress, SessionAnnouncer
#   publish_progress(user_id, task_id, snapshot)
# =============================================================================

from app.websocket.manager import websocket_manager
from app.websocket.broadcast import (
    SessionAnnouncer,
    publish_announcement,
    publish_event,
    publish_progress,
    publish_task_complete,
    publish_task_failed,
    WEBSOCKET_CHANNEL,
)

__all__ = [
    "websocket_manager",
    "SessionAnnouncer",
    "publish_announcement",
    "publish_event",
    "publish_progress",
    "publish_task_complete",
    "publish_task_failed",
    "WEBSOCKET_CHANNEL",
]
