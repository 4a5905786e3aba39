"""Order model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from orderchat.database import Base


class Order(Base):
    """
    An order between one buyer and one seller.
    Owned by the order system; the chat only reads it.
    """
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    buyer_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    seller_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    def has_party(self, user_id: int) -> bool:
        return user_id in (self.buyer_id, self.seller_id)
