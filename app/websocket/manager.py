# =============================================================================
# app/websocket/manager.py - WebSocket Connection Manager
# =============================================================================
# Manages WebSocket connections per user and handles broadcasting.
# A user may have several tabs open; each gets every event for that user.
#
# Usage:
#   from app.websocket import websocket_manager
#
#   await websocket_manager.connect(user_id, websocket)
#   await websocket_manager.broadcast(user_id, {"type": "progress", ...})
#   websocket_manager.disconnect(user_id, websocket)
# =============================================================================

import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket connections organized by user ID.

    Generation events carry a task_id, so clients watching one task simply
    ignore the others.
    """

    def __init__(self):
        # user_id -> set of WebSocket connections
        self.connections: dict[str, set[WebSocket]] = {}

    @property
    def total_connections(self) -> int:
        return sum(len(sockets) for sockets in self.connections.values())

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        """Accept a new WebSocket connection and track it."""
        await websocket.accept()
        self.connections.setdefault(user_id, set()).add(websocket)

        logger.info(
            f"WebSocket connected for user {user_id}. "
            f"Total connections: {self.total_connections}"
        )

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        """Stop tracking a connection (no-op if it isn't tracked)."""
        sockets = self.connections.get(user_id)
        if sockets is None:
            return

        sockets.discard(websocket)
        if not sockets:
            del self.connections[user_id]

        logger.info(
            f"WebSocket disconnected for user {user_id}. "
            f"Total connections: {self.total_connections}"
        )

    async def broadcast(self, user_id: str, message: dict) -> int:
        """
        Send a message to every connection of a user.

        Connections that fail to receive are dropped.

        Returns:
            int: Number of clients the message was sent to
        """
        sockets = self.connections.get(user_id)
        if not sockets:
            logger.debug(f"No connections for user {user_id}, skipping {message.get('type')}")
            return 0

        dead: list[WebSocket] = []
        sent_count = 0

        for websocket in list(sockets):
            try:
                await websocket.send_json(message)
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                dead.append(websocket)

        for websocket in dead:
            self.disconnect(user_id, websocket)

        logger.debug(
            f"Broadcast to user {user_id}: "
            f"type={message.get('type')}, sent to {sent_count} clients"
        )
        return sent_count

    async def close_all(self, code: int = 1001, reason: str = "Server shutting down") -> None:
        """Close every tracked connection (used on shutdown)."""
        for user_id, sockets in list(self.connections.items()):
            for websocket in list(sockets):
                try:
                    await websocket.close(code=code, reason=reason)
                except Exception as e:
                    logger.debug(f"Error closing WebSocket for user {user_id}: {e}")
        self.connections.clear()

    def get_connection_count(self, user_id: str | None = None) -> int:
        """Connections for one user, or in total."""
        if user_id:
            return len(self.connections.get(user_id, set()))
        return self.total_connections

    def get_active_users(self) -> list[str]:
        """User IDs with at least one connection."""
        return list(self.connections.keys())


# Global singleton instance
websocket_manager = ConnectionManager()
