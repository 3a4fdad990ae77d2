"""WebSocket connection management with round controller integration."""

import asyncio
import json
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from typing import Any

from api.presenter import snapshot_to_response
from api.session import TableSession, extract_session_id, get_session_store
from core.cards import EmptyDeckError
from core.game import GameEvent, RoundSnapshot

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """Manage WebSocket connections and their pending game events."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        self._event_queues: dict[str, asyncio.Queue] = {}

    async def connect(self, websocket: WebSocket, session_id: str) -> bool:
        """
        Register and accept a connection.

        Returns:
            False if the table already has an open connection
        """
        if session_id in self._connections:
            return False
        self._connections[session_id] = websocket
        self._event_queues[session_id] = asyncio.Queue()
        await websocket.accept()
        return True

    def disconnect(self, session_id: str, websocket: WebSocket) -> None:
        """Remove a connection. The table stays for reconnection."""
        if self._connections.get(session_id) is not websocket:
            return
        del self._connections[session_id]
        self._event_queues.pop(session_id, None)

    def queue_event(self, session_id: str, event: GameEvent) -> None:
        """Queue an event for delivery after the current action."""
        if session_id in self._event_queues:
            self._event_queues[session_id].put_nowait(event)

    def drain_events(self, session_id: str) -> list[GameEvent]:
        """Take every queued event for a session."""
        queue = self._event_queues.get(session_id)
        events: list[GameEvent] = []
        while queue is not None and not queue.empty():
            events.append(queue.get_nowait())
        return events

    async def send_message(self, session_id: str, message: dict[str, Any]) -> None:
        """Send a message to a specific session."""
        if session_id in self._connections:
            await self._connections[session_id].send_json(message)


# Global connection manager
manager = ConnectionManager()


def _state_message(
    snapshot: RoundSnapshot,
    table: TableSession,
    reason: str | None = None,
) -> dict[str, Any]:
    message: dict[str, Any] = {
        "type": "state_update",
        "state": snapshot_to_response(snapshot, table).model_dump(mode="json"),
    }
    if reason is not None:
        message["reason"] = reason
    return message


async def _reject(websocket: WebSocket, message: str, code: int) -> None:
    await websocket.accept()
    await websocket.send_json({"type": "error", "message": message})
    await websocket.close(code=code)


def _event_to_message(event: GameEvent) -> dict[str, Any]:
    """Convert a game event to a WebSocket message."""
    return {
        "type": "event",
        "event_type": event.event_type.name,
        "data": event.data,
    }


@router.websocket("/game/{session_token}")
async def game_websocket(websocket: WebSocket, session_token: str) -> None:
    """
    WebSocket endpoint for real-time table updates.

    Messages from client:
    - {"type": "deal"|"hit"|"stand"|"restart"}
    - {"type": "get_state"}

    Messages to client:
    - {"type": "event", "event_type": "...", "data": {...}} per engine event
    - {"type": "state_update", "state": {...}, "reason"?: "auto_restart"}
    - {"type": "error", "message": "..."}
    """
    session_id = extract_session_id(session_token)
    table = get_session_store().get(session_id) if session_id is not None else None
    if session_id is None or table is None:
        await _reject(websocket, "Session not found or expired", code=4404)
        return

    if not await manager.connect(websocket, session_id):
        await _reject(websocket, "Table already open in another connection", code=4409)
        return

    def on_event(event: GameEvent) -> None:
        manager.queue_event(session_id, event)

    async def on_auto_restart(snapshot: RoundSnapshot) -> None:
        await flush_events()
        await manager.send_message(
            session_id, _state_message(snapshot, table, reason="auto_restart")
        )

    async def flush_events() -> None:
        for event in manager.drain_events(session_id):
            await manager.send_message(session_id, _event_to_message(event))

    table.game.subscribe(on_event)
    table.listeners.append(on_auto_restart)

    actions = {
        "deal": table.deal,
        "hit": table.hit,
        "stand": table.stand,
        "restart": table.restart,
        "get_state": table.game.snapshot,
    }

    try:
        await manager.send_message(session_id, _state_message(table.game.snapshot(), table))

        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await manager.send_message(session_id, {
                    "type": "error",
                    "message": "Malformed message",
                })
                continue

            msg_type = message.get("type") if isinstance(message, dict) else None
            action_fn = actions.get(msg_type) if isinstance(msg_type, str) else None
            if action_fn is None:
                await manager.send_message(session_id, {
                    "type": "error",
                    "message": f"Unknown message type: {msg_type}",
                })
                continue

            try:
                snapshot = action_fn()
            except EmptyDeckError:
                await flush_events()
                await manager.send_message(session_id, {
                    "type": "error",
                    "message": "Round aborted: deck exhausted",
                })
                snapshot = table.game.snapshot()

            await flush_events()
            await manager.send_message(session_id, _state_message(snapshot, table))

    except WebSocketDisconnect:
        logger.debug("Client left table %s", session_id)
    finally:
        table.game.unsubscribe(on_event)
        table.listeners.remove(on_auto_restart)
        manager.disconnect(session_id, websocket)
