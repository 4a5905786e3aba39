"""Who may join an order's chat."""

import logging

from orderchat.services.store import ChatStore

logger = logging.getLogger(__name__)


async def can_join(store: ChatStore, order_id: str, user_id: int) -> bool:
    """True only if the user is the order's buyer or seller. Never raises."""
    try:
        order = await store.get_order(order_id)
    except Exception as e:
        logger.warning(f"Denied user {user_id} on order {order_id}: {e}")
        return False

    if not order.has_party(user_id):
        logger.warning(f"Denied user {user_id} on order {order_id}: not a party")
        return False
    return True
