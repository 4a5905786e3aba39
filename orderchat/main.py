"""
orderchat — FastAPI application entry-point.

Run with:
    uvicorn orderchat.main:app
or the ``orderchat`` console script, which also serves TLS when
SSL_CERTFILE and SSL_KEYFILE are configured.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderchat.config import Settings, settings as default_settings
from orderchat.database import Database
from orderchat.routers import chat
from orderchat.services.chat import ChatService
from orderchat.services.rooms import RoomRegistry
from orderchat.services.store import ChatStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings
    database = database or Database.from_settings(settings)

    # ── Lifespan: create tables on startup, release the pool on shutdown ──
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.CREATE_TABLES:
            await database.create_all()
        logger.info(f"{settings.APP_NAME} ready")
        yield
        await database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Buyer/seller chat for orders — real-time relay with moderation flags.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
    )

    app.state.database = database
    app.state.chat = ChatService(
        ChatStore(database),
        RoomRegistry(),
        history_limit=settings.HISTORY_LIMIT,
    )

    app.include_router(chat.router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    logging.basicConfig(
        level=default_settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ssl_kwargs = {}
    if default_settings.ssl_enabled:
        ssl_kwargs = {
            "ssl_certfile": default_settings.SSL_CERTFILE,
            "ssl_keyfile": default_settings.SSL_KEYFILE,
        }
    scheme = "wss" if ssl_kwargs else "ws"
    logger.info(f"WebSocket server running on {scheme}://{default_settings.HOST}:{default_settings.PORT}/ws")
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT, **ssl_kwargs)


if __name__ == "__main__":
    run()
