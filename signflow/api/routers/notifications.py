"""
Document notification WebSocket endpoint.

Route: WS /ws/documents/{document_id}?token=...

Authenticates with the same bearer token as the HTTP API, checks the caller
may view the document, then keeps the connection in the document's room
until the client disconnects. Clients may send "ping" to keep the
connection alive.

Dependencies: fastapi, signflow.api.deps, signflow.application.services
System role: Real-time document change notifications
"""

import logging
from uuid import UUID

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from signflow.api.deps.auth import authenticate_token
from signflow.api.deps.dependencies import get_connection_manager
from signflow.application.services import WorkflowService
from signflow.boundary.db import get_async_session_factory
from signflow.configs import get_settings
from signflow.core.exceptions import SignFlowException

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

POLICY_VIOLATION = 1008


@router.websocket("/ws/documents/{document_id}")
async def document_events(websocket: WebSocket, document_id: UUID):
    """Subscribe to change events of one document."""
    await websocket.accept()

    session_factory = get_async_session_factory()
    try:
        async with session_factory() as db:
            caller = await authenticate_token(
                db, websocket.query_params.get("token"), get_settings().auth
            )
            await WorkflowService(db=db).get_document(document_id, caller)
    except SignFlowException as e:
        logger.warning(
            "WebSocket subscription rejected",
            extra={"document_id": str(document_id), "error": e.message},
        )
        await websocket.close(code=POLICY_VIOLATION, reason=e.message)
        return

    manager = get_connection_manager()
    room = str(document_id)
    await manager.join(room, websocket)
    await websocket.send_json({"event": "subscribed", "document_id": room})

    try:
        while True:
            message = await websocket.receive_text()
            if message.strip().lower() == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        logger.debug("WebSocket disconnected", extra={"document_id": room})
    finally:
        await manager.leave(room, websocket)
