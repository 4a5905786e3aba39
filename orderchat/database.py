"""
orderchat – Async SQLAlchemy engine, session factory, and declarative base.

The engine is owned by a ``Database`` object that is built once at startup
and handed to whatever needs the store, instead of living at module level.
"""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


# ── Declarative base ──
class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class Database:
    """Bounded pool of store connections plus the session factory bound to it."""

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: float = 30.0,
        echo: bool = False,
    ):
        engine_kwargs: Dict[str, Any] = {"echo": echo}

        # SQLite picks its own pool class; a server database gets a fixed
        # ceiling and callers wait up to pool_timeout for a free connection.
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
            )

        # PgBouncer (transaction mode) does not support prepared statement caching.
        if "postgresql" in url:
            engine_kwargs["connect_args"] = {"statement_cache_size": 0}

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            echo=settings.DEBUG,
        )

    def session(self) -> AsyncSession:
        """Open a new async session; use as ``async with db.session() as s``."""
        return self.session_factory()

    async def create_all(self) -> None:
        # Import models so every table is registered on Base.metadata.
        import orderchat.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
