"""Per-connection session state."""

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from orderchat.models.message import SenderRole


class Connection(Protocol):
    """What a session needs from its transport (a Starlette WebSocket fits)."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...


class SessionState(str, enum.Enum):
    UNJOINED = "unjoined"
    AUTHORIZING = "authorizing"
    JOINED = "joined"
    TERMINATED = "terminated"


@dataclass(eq=False)
class ChatSession:
    """
    One live connection and the identity it joined with.

    ``user_id``, ``user_type`` and ``order_id`` are only set while the
    session is JOINED; every other state clears them.
    """

    connection: Connection
    state: SessionState = SessionState.UNJOINED
    user_id: Optional[int] = None
    user_type: Optional[SenderRole] = None
    order_id: Optional[str] = None
    _send_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def is_joined(self) -> bool:
        return self.state is SessionState.JOINED

    def begin_authorizing(self) -> None:
        self._clear()
        self.state = SessionState.AUTHORIZING

    def mark_joined(self, order_id: str, user_id: int, user_type: SenderRole) -> None:
        if self.state is not SessionState.AUTHORIZING:
            raise RuntimeError(f"cannot join from state {self.state.value}")
        self.order_id = order_id
        self.user_id = user_id
        self.user_type = user_type
        self.state = SessionState.JOINED

    def reject(self) -> None:
        self._clear()
        self.state = SessionState.UNJOINED

    def terminate(self) -> None:
        self._clear()
        self.state = SessionState.TERMINATED

    def _clear(self) -> None:
        self.order_id = None
        self.user_id = None
        self.user_type = None

    async def emit(self, event: str, data: Any) -> None:
        """Send one ``{"event", "data"}`` frame; frames never interleave on one socket."""
        async with self._send_lock:
            await self.connection.send_json({"event": event, "data": data})
