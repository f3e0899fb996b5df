"""
Document change notifications.

The workflow service publishes DocumentEvents after a committed transition.
Publishing only enqueues; a background NotificationDispatcher drains the
queue and fans each event out to the WebSocket watchers of the document's
room. Delivery failures are logged and never reach the publisher.

Dependencies: fastapi (WebSocket), starlette, signflow.models.events
System role: Asynchronous notification fan-out
"""

import asyncio
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from signflow.models.events import DocumentEvent

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Tracks WebSocket connections per document room.

    Rooms: document_id -> set[WebSocket]
    """

    def __init__(self) -> None:
        self._rooms: dict[str, set[WebSocket]] = {}

    def room_size(self, document_id: str) -> int:
        return len(self._rooms.get(document_id, ()))

    async def join(self, document_id: str, websocket: WebSocket) -> None:
        """Add a connection to a document room."""
        self._rooms.setdefault(document_id, set()).add(websocket)
        logger.debug(f"{__name__}:join - document_id={document_id}")

    async def leave(self, document_id: str, websocket: WebSocket) -> None:
        """Remove a connection and drop the room once empty."""
        room = self._rooms.get(document_id)
        if room is None:
            return
        room.discard(websocket)
        if not room:
            del self._rooms[document_id]
        logger.debug(f"{__name__}:leave - document_id={document_id}")

    async def broadcast(self, event: DocumentEvent) -> int:
        """
        Send an event to every connection in the document's room.

        Connections that fail to receive are dropped from the room.

        Returns:
            int: Number of connections the event was delivered to
        """
        payload = event.model_dump(mode="json")
        delivered = 0
        for websocket in list(self._rooms.get(event.document_id, ())):
            try:
                if websocket.client_state == WebSocketState.CONNECTED:
                    await websocket.send_json(payload)
                    delivered += 1
            except Exception as e:
                logger.warning(
                    f"{__name__}:broadcast - Dropping connection: {type(e).__name__}: {e}",
                    extra={"document_id": event.document_id},
                )
                await self.leave(event.document_id, websocket)
        return delivered


class EventPublisher:
    """Non-blocking publisher backed by a bounded asyncio.Queue."""

    def __init__(self, maxsize: int = 1000) -> None:
        self.queue: asyncio.Queue[DocumentEvent] = asyncio.Queue(maxsize=maxsize)

    def publish(self, event: DocumentEvent) -> None:
        """Enqueue an event. A full queue drops the event with a warning."""
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                f"{__name__}:publish - Queue full, dropping event",
                extra={"event": event.event.value, "document_id": event.document_id},
            )


class NotificationDispatcher:
    """Background consumer delivering published events to the ConnectionManager."""

    def __init__(self, publisher: EventPublisher, manager: ConnectionManager) -> None:
        self._publisher = publisher
        self._manager = manager
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"{__name__}:start - Notification dispatcher started")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"{__name__}:stop - Notification dispatcher stopped")

    async def dispatch_one(self, event: DocumentEvent) -> None:
        """Deliver a single event, logging instead of raising on failure."""
        try:
            delivered = await self._manager.broadcast(event)
            logger.debug(
                f"{__name__}:dispatch_one - Delivered {event.event.value}",
                extra={"document_id": event.document_id, "watchers": delivered},
            )
        except Exception as e:
            logger.error(
                f"{__name__}:dispatch_one - {type(e).__name__}: {e}",
                extra={"document_id": event.document_id},
                exc_info=True,
            )

    async def _run(self) -> None:
        queue = self._publisher.queue
        while True:
            event = await queue.get()
            try:
                await self.dispatch_one(event)
            finally:
                queue.task_done()
