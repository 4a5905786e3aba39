"""Chat event payloads — inbound WebSocket events and outbound message records."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from orderchat.models.message import SenderRole


class JoinRoom(BaseModel):
    """`join_room` — attach this connection to an order's channel."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    order_id: str = Field(min_length=1)
    user_id: int
    user_type: SenderRole


class SendMessage(BaseModel):
    """`send_message` — post to the joined channel."""
    message: str
    image_url: Optional[str] = None


class ReportMessage(BaseModel):
    """`report_message` — flag a stored message for moderation."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    message_id: str = Field(min_length=1)


class MessageRecord(BaseModel):
    """A stored message as delivered to clients, with the sender's display name."""
    id: str
    room_id: str
    order_id: str
    buyer_id: int
    seller_id: int
    message: str
    image_url: Optional[str] = None
    sent_by: SenderRole
    created_at: datetime
    reported: bool = False
    username: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Stored timestamps are UTC; SQLite and MySQL hand them back naive.
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)


class ReportAck(BaseModel):
    success: bool = True
