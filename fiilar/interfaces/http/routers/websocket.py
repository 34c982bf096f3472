"""Websocket endpoint for push delivery to web clients."""
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from fiilar.core.security import InvalidTokenError, parse_access_token
from fiilar.interfaces.ws.manager import manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def web_socket(websocket: WebSocket, token: str = Query(...)):
    try:
        token_data = parse_access_token(token)
    except InvalidTokenError as exc:
        logger.warning("WebSocket token invalid: %s", exc)
        await websocket.close(code=1008, reason="Token validation failed")
        return

    user_id = token_data.account_id
    await manager.connect_web(user_id, websocket)
    try:
        while True:
            # clients only listen; inbound frames are ignored
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Web user %s disconnected", user_id)
    finally:
        await manager.disconnect_web(user_id, websocket)
