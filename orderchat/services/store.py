"""Persistence gateway — every query the chat runs against the store."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional

from sqlalchemy import case, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from orderchat.database import Database
from orderchat.models.message import Message, SenderRole
from orderchat.models.order import Order
from orderchat.models.user import User
from orderchat.schemas.chat import MessageRecord
from orderchat.services.errors import NotFoundFailure, PersistenceFailure

logger = logging.getLogger(__name__)


class ChatStore:
    def __init__(self, database: Database):
        self.database = database

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        """Open a session; any SQLAlchemy error becomes a PersistenceFailure."""
        async with self.database.session() as db:
            try:
                yield db
            except SQLAlchemyError as e:
                await db.rollback()
                raise PersistenceFailure(f"{action} failed: {e}") from e

    async def get_order(self, order_id: str) -> Order:
        async with self._session("order lookup") as db:
            res = await db.execute(select(Order).where(Order.id == order_id))
            order = res.scalar_one_or_none()
        if order is None:
            raise NotFoundFailure(f"order {order_id} does not exist")
        return order

    async def get_username(self, user_id: int) -> Optional[str]:
        async with self._session("username lookup") as db:
            res = await db.execute(select(User.username).where(User.id == user_id))
            return res.scalar_one_or_none()

    async def insert_message(
        self,
        *,
        message_id: str,
        order: Order,
        text: str,
        image_url: Optional[str],
        sent_by: SenderRole,
    ) -> Message:
        """Write one message row and return it as stored."""
        async with self._session("message insert") as db:
            msg = Message(
                id=message_id,
                room_id=order.id,
                order_id=order.id,
                buyer_id=order.buyer_id,
                seller_id=order.seller_id,
                message=text,
                image_url=image_url,
                sent_by=SenderRole(sent_by).value,
                created_at=datetime.now(timezone.utc),
                reported=False,
            )
            db.add(msg)
            await db.commit()
            await db.refresh(msg)
            return msg

    async def recent_messages(self, order_id: str, limit: int = 50) -> List[MessageRecord]:
        """The newest `limit` messages of an order, oldest first, with sender usernames."""
        buyer = aliased(User)
        seller = aliased(User)
        username = case(
            (Message.sent_by == SenderRole.BUYER.value, buyer.username),
            else_=seller.username,
        ).label("username")

        async with self._session("history lookup") as db:
            res = await db.execute(
                select(Message, username)
                .outerjoin(buyer, Message.buyer_id == buyer.id)
                .outerjoin(seller, Message.seller_id == seller.id)
                .where(Message.order_id == order_id)
                .order_by(desc(Message.created_at), desc(Message.seq))
                .limit(limit)
            )
            rows = res.all()

        rows.reverse()  # chronological order for display
        return [message_record(msg, name) for msg, name in rows]

    async def flag_message(self, message_id: str) -> Message:
        """Set reported = true. Flagging an already reported message is a no-op."""
        async with self._session("message flag") as db:
            res = await db.execute(select(Message).where(Message.id == message_id))
            msg = res.scalar_one_or_none()
            if msg is None:
                raise NotFoundFailure(f"message {message_id} does not exist")
            if not msg.reported:
                msg.reported = True
                await db.commit()
            return msg


def message_record(msg: Message, username: Optional[str]) -> MessageRecord:
    record = MessageRecord.model_validate(msg)
    record.username = username
    return record
