# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# WebSocket endpoint for real-time generation updates.
#
# Connect: ws://host/ws/users/{user_id}?token={jwt}
#
# Events:
#   - {"type": "progress", "task_id": "...", "phase": "loading", "progress": 25.0, "steps": [...]}
#   - {"type": "announcement", "task_id": "...", "message": "...", "priority": "polite"}
#   - {"type": "task_complete", "task_id": "...", "status": "SUCCESS", "result": {...}}
#   - {"type": "task_failed", "task_id": "...", "error": "...", "failed_step": "..."}
# =============================================================================

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query

from app.auth import InvalidTokenError, verify_access_token
from app.websocket.manager import websocket_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/users/{user_id}")
async def user_websocket(
    websocket: WebSocket,
    user_id: str,
    token: str = Query(..., description="JWT token for authentication")
):
    """
    WebSocket endpoint for a user's generation updates.

    Authentication is required via the `token` query parameter, and the
    token must belong to user_id.
    """
    # 1. Verify JWT token
    try:
        user = verify_access_token(token)
    except InvalidTokenError as e:
        logger.warning(f"WebSocket auth failed: {e.message}")
        await websocket.close(code=4001, reason=e.message)
        return

    # 2. Users may only watch their own channel
    if str(user.id) != user_id:
        logger.warning(f"WebSocket access denied: user {user.id} tried to watch {user_id}")
        await websocket.close(code=4003, reason="Access denied")
        return

    # 3. Accept connection and add to manager
    await websocket_manager.connect(user_id, websocket)

    try:
        await websocket.send_json({
            "type": "connected",
            "user_id": user_id,
            "message": "Connected to generation updates"
        })

        while True:
            data = await websocket.receive_text()

            # Keepalive
            if data == "ping":
                await websocket.send_text("pong")
            else:
                logger.debug(f"WebSocket received: {data[:100]}")

    except WebSocketDisconnect:
        logger.info(f"WebSocket client disconnected for user {user_id}")
    finally:
        websocket_manager.disconnect(user_id, websocket)


@router.get("/ws/status")
async def websocket_status():
    """
    Get WebSocket connection statistics.

    Returns:
        dict: Connection counts and active users
    """
    active_users = websocket_manager.get_active_users()
    return {
        "total_connections": websocket_manager.get_connection_count(),
        "user_count": len(active_users),
    }
