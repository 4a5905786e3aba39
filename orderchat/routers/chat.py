"""
WebSocket chat router — order-scoped rooms over named JSON events.

Every frame, in both directions, is ``{"event": <name>, "data": <payload>}``.
"""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from orderchat.services.chat import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.websocket("/ws")
async def websocket_chat_endpoint(websocket: WebSocket):
    """
    One task per connection. Events are handled one at a time, in the order
    the client sent them; a failed event is reported back and the loop goes on.
    """
    chat: ChatService = websocket.app.state.chat

    await websocket.accept()
    session = chat.connect(websocket)
    logger.info(f"Client connected: {websocket.client}")

    try:
        # Receive loop
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            # Text and binary frames carry the same JSON envelope.
            raw = message.get("text") or message.get("bytes") or ""
            try:
                frame = json.loads(raw)
            except ValueError:
                frame = None
            if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
                await session.emit("error", "Malformed frame")
                continue

            await chat.dispatch(session, frame["event"], frame.get("data"))

    except WebSocketDisconnect:
        pass
    finally:
        await chat.disconnect(session)
        logger.info(f"Client disconnected: {websocket.client}")
