"""Room membership registry — which live sessions belong to which order's channel."""

import asyncio
import logging
from typing import Any, Dict, Optional, Set

from orderchat.services.session import ChatSession

logger = logging.getLogger(__name__)


class RoomRegistry:
    def __init__(self):
        # Maps order_id to the sessions currently joined to it
        self.active_rooms: Dict[str, Set[ChatSession]] = {}
        self._room_of: Dict[ChatSession, str] = {}
        self._lock = asyncio.Lock()

    async def join(self, order_id: str, session: ChatSession) -> None:
        """Add a session to a room, moving it out of any room it was already in."""
        async with self._lock:
            self._remove(session)
            self.active_rooms.setdefault(order_id, set()).add(session)
            self._room_of[session] = order_id

    async def leave(self, session: ChatSession) -> Optional[str]:
        """Drop a session from its room. Returns the room it left, if any."""
        async with self._lock:
            return self._remove(session)

    def _remove(self, session: ChatSession) -> Optional[str]:
        order_id = self._room_of.pop(session, None)
        if order_id is None:
            return None
        members = self.active_rooms.get(order_id)
        if members is not None:
            members.discard(session)
            if not members:
                del self.active_rooms[order_id]
        return order_id

    async def members(self, order_id: str) -> Set[ChatSession]:
        async with self._lock:
            return set(self.active_rooms.get(order_id, ()))

    async def broadcast(self, order_id: str, event: str, payload: Any) -> int:
        """
        Deliver to every member joined at call time.
        A member whose socket fails is skipped. Returns the number of deliveries.
        """
        delivered = 0
        for session in await self.members(order_id):
            try:
                await session.emit(event, payload)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropped {event} for a member of room {order_id}: {e}")
        return delivered
