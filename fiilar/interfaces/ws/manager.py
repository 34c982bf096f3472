"""Connection manager for web websocket clients."""
import json
import logging
from typing import Any, Callable, Dict, Optional

from fastapi import WebSocket

from fiilar.core.events import MESSAGE_SENT, NOTIFICATIONS_UPDATED, EventBus
from fiilar.schemas import WSMessage

logger = logging.getLogger(__name__)

PUSHED_EVENTS = (NOTIFICATIONS_UPDATED, MESSAGE_SENT)


class ConnectionManager:
    def __init__(self) -> None:
        self.web_connections: Dict[str, list[WebSocket]] = {}
        self._unsubscribers: list[Callable[[], None]] = []

    async def connect_web(self, user_id: str, websocket: WebSocket) -> None:
        # must be registered before the client sees the accept
        self.register(user_id, websocket)
        await websocket.accept()

    def register(self, user_id: str, websocket: WebSocket) -> None:
        self.web_connections.setdefault(user_id, []).append(websocket)
        logger.info("Web user %s connected", user_id)

    async def disconnect_web(self, user_id: str, websocket: Optional[WebSocket] = None) -> None:
        sockets = self.web_connections.get(user_id, [])
        if websocket is None:
            sockets.clear()
        elif websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self.web_connections.pop(user_id, None)
        logger.info("Web user %s disconnected", user_id)

    async def send_to_web(self, user_id: str, message: dict) -> bool:
        sockets = list(self.web_connections.get(user_id, []))
        if not sockets:
            logger.debug("Web user %s is not online", user_id)
            return False
        text = json.dumps(message, default=str)
        delivered = False
        for websocket in sockets:
            try:
                await websocket.send_text(text)
                delivered = True
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Failed to push to web user %s: %s", user_id, exc)
                await self.disconnect_web(user_id, websocket)
        return delivered

    def is_online(self, user_id: str) -> bool:
        return bool(self.web_connections.get(user_id))

    def get_online_count(self) -> int:
        return len(self.web_connections)

    async def handle_event(self, event: str, payload: dict[str, Any]) -> None:
        user_id = payload.get("user_id")
        if not user_id:
            return
        await self.send_to_web(user_id, WSMessage(type=event, data=payload).model_dump(mode="json"))

    def bind(self, events: EventBus) -> None:
        if self._unsubscribers:
            return
        for name in PUSHED_EVENTS:
            self._unsubscribers.append(events.subscribe(name, self.handle_event))

    def unbind(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()


manager = ConnectionManager()
