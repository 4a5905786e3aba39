"""
Chat service — join protocol, message pipeline, and moderation flagging.

Each handler takes the calling session and the raw event payload. Failures
are raised as ``ChatError`` and turned into an ``error`` event for the
calling connection by ``dispatch``; nothing here closes a connection.
"""

import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, Type

from pydantic import BaseModel, ValidationError

from orderchat.schemas.chat import JoinRoom, ReportAck, ReportMessage, SendMessage
from orderchat.services.authorization import can_join
from orderchat.services.errors import (
    AuthenticationRequired,
    AuthorizationFailure,
    ChatError,
)
from orderchat.services.rooms import RoomRegistry
from orderchat.services.session import ChatSession, Connection
from orderchat.services.store import ChatStore, message_record

logger = logging.getLogger(__name__)

Handler = Callable[[ChatSession, Any], Awaitable[None]]


class ChatService:
    def __init__(self, store: ChatStore, rooms: RoomRegistry, history_limit: int = 50):
        self.store = store
        self.rooms = rooms
        self.history_limit = history_limit
        self.handlers: Dict[str, Handler] = {
            "join_room": self.join_room,
            "send_message": self.send_message,
            "report_message": self.report_message,
        }

    # ── Connection lifecycle ──

    def connect(self, connection: Connection) -> ChatSession:
        return ChatSession(connection=connection)

    async def disconnect(self, session: ChatSession) -> None:
        order_id = await self.rooms.leave(session)
        if order_id is not None:
            logger.info(f"User {session.user_id} left room {order_id}")
        session.terminate()

    async def dispatch(self, session: ChatSession, event: str, data: Any) -> None:
        """Run the handler for one client event, reporting any failure to that client only."""
        handler = self.handlers.get(event)
        if handler is None:
            await session.emit("error", f"Unknown event: {event}")
            return

        try:
            await handler(session, data)
        except ChatError as e:
            await session.emit("error", e.client_message)
        except Exception:
            logger.exception(f"Unhandled error in {event}")
            await session.emit("error", "Internal server error")

    # ── join_room ──

    async def join_room(self, session: ChatSession, data: Any) -> None:
        payload = _parse(JoinRoom, data, "join_room")

        # Re-joining drops the previous room before the new one is checked.
        await self.rooms.leave(session)
        session.begin_authorizing()

        if not await can_join(self.store, payload.order_id, payload.user_id):
            session.reject()
            raise AuthorizationFailure(f"user {payload.user_id} on order {payload.order_id}")

        session.mark_joined(payload.order_id, payload.user_id, payload.user_type)
        await self.rooms.join(payload.order_id, session)
        logger.info(f"User {payload.user_id} joined room {payload.order_id}")

        try:
            history = await self.store.recent_messages(payload.order_id, self.history_limit)
        except ChatError as e:
            logger.error(f"Error loading history for room {payload.order_id}: {e}")
            raise ChatError(str(e), client_message="Failed to join conversation") from e

        await session.emit("recent_messages", [m.model_dump(mode="json") for m in history])

    # ── send_message ──

    async def send_message(self, session: ChatSession, data: Any) -> None:
        if not session.is_joined:
            raise AuthenticationRequired(f"send_message in state {session.state.value}")
        payload = _parse(SendMessage, data, "send_message")

        # Snapshot identity: a later join on this connection must not change this send.
        order_id, user_id, user_type = session.order_id, session.user_id, session.user_type

        try:
            order = await self.store.get_order(order_id)
            msg = await self.store.insert_message(
                message_id=str(uuid.uuid4()),
                order=order,
                text=payload.message,
                image_url=payload.image_url,
                sent_by=user_type,
            )
            username = await self.store.get_username(user_id)
        except ChatError as e:
            logger.error(f"Error sending message to room {order_id}: {e}")
            raise ChatError(str(e), client_message="Failed to send message") from e

        record = message_record(msg, username)
        await self.rooms.broadcast(order_id, "new_message", record.model_dump(mode="json"))

    # ── report_message ──

    async def report_message(self, session: ChatSession, data: Any) -> None:
        # No joined session required: any connection may flag a message id it knows.
        payload = _parse(ReportMessage, data, "report_message")
        try:
            await self.store.flag_message(payload.message_id)
        except ChatError as e:
            logger.error(f"Error reporting message {payload.message_id}: {e}")
            raise ChatError(str(e), client_message="Failed to report message") from e

        logger.info(f"Message {payload.message_id} reported")
        await session.emit("message_reported", ReportAck().model_dump())


def _parse(model: Type[BaseModel], data: Any, event: str):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ChatError(str(e), client_message=f"Invalid payload for {event}") from e
