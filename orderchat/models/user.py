"""User model — only the columns the chat reads."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from orderchat.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
