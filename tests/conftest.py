"""Shared pytest fixtures.

Every test gets its own file-based SQLite database seeded with:
- users 1 (alice_buys), 2 (bob_sells), 3 (carol)
- order O1: buyer 1, seller 2
- order O2: buyer 1, seller 3
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List

import pytest
import pytest_asyncio
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

import orderchat.models  # noqa: F401
from orderchat.database import Base, Database
from orderchat.models.message import Message
from orderchat.models.order import Order
from orderchat.models.user import User
from orderchat.services.chat import ChatService
from orderchat.services.rooms import RoomRegistry
from orderchat.services.store import ChatStore

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Fake transport
# ============================================================================


class FakeConnection:
    """Stands in for a WebSocket; records every frame sent to it."""

    def __init__(self, fail: bool = False):
        self.frames: List[dict] = []
        self.fail = fail

    async def send_json(self, data: Any, mode: str = "text") -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.frames.append(data)

    def events(self, name: str) -> List[Any]:
        return [f["data"] for f in self.frames if f["event"] == name]

    @property
    def names(self) -> List[str]:
        return [f["event"] for f in self.frames]


# ============================================================================
# Database helpers (sync engine, used for seeding and inspection)
# ============================================================================


def seed_database(path: Path) -> None:
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    with Session(engine) as s:
        s.add_all([
            User(id=1, username="alice_buys"),
            User(id=2, username="bob_sells"),
            User(id=3, username="carol"),
        ])
        s.flush()
        s.add_all([
            Order(id="O1", buyer_id=1, seller_id=2),
            Order(id="O2", buyer_id=1, seller_id=3),
        ])
        s.commit()
    engine.dispose()


def add_messages(
    path: Path, order_id: str, count: int, start: int = 0, step: timedelta = timedelta(minutes=1)
) -> None:
    """Insert `count` messages `step` apart (one minute by default), alternating buyer/seller."""
    engine = create_engine(f"sqlite:///{path}")
    with Session(engine) as s:
        order = s.get(Order, order_id)
        for i in range(start, start + count):
            s.add(Message(
                id=f"{order_id}-m{i:03d}",
                room_id=order_id,
                order_id=order_id,
                buyer_id=order.buyer_id,
                seller_id=order.seller_id,
                message=f"message {i}",
                sent_by="buyer" if i % 2 == 0 else "seller",
                created_at=BASE_TIME + step * i,
            ))
        s.commit()
    engine.dispose()


def fetch_messages(path: Path) -> List[dict]:
    engine = create_engine(f"sqlite:///{path}")
    with Session(engine) as s:
        rows = s.execute(select(Message).order_by(Message.created_at, Message.seq)).scalars().all()
        out = [
            {c.name: getattr(m, c.name) for c in Message.__table__.columns}
            for m in rows
        ]
    engine.dispose()
    return out


def count_messages(path: Path) -> int:
    engine = create_engine(f"sqlite:///{path}")
    with Session(engine) as s:
        n = s.execute(select(func.count(Message.id))).scalar_one()
    engine.dispose()
    return n


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "orderchat-test.db"
    seed_database(path)
    return path


@pytest_asyncio.fixture
async def database(db_path: Path):
    db = Database(f"sqlite+aiosqlite:///{db_path}")
    yield db
    await db.dispose()


@pytest.fixture
def store(database: Database) -> ChatStore:
    return ChatStore(database)


@pytest.fixture
def rooms() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture
def chat(store: ChatStore, rooms: RoomRegistry) -> ChatService:
    return ChatService(store, rooms)
