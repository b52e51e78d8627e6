"""FastAPI application factory for the worm arcade server."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from worm_arcade import __version__
from worm_arcade.server.routes import router
from worm_arcade.server.session_manager import SessionManager
from worm_arcade.server.websocket import ws_router

logger = logging.getLogger(__name__)


def create_app(max_sessions: int = 50) -> FastAPI:
    """Build the app; at most *max_sessions* games may exist at once.

    A session manager already placed on ``app.state`` before startup is
    kept, so callers can inject their own registry.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        manager = getattr(app.state, "session_manager", None)
        if manager is None:
            manager = app.state.session_manager = SessionManager(max_sessions)
        logger.info("Worm arcade server up (max %d sessions).", max_sessions)
        try:
            yield
        finally:
            await manager.cleanup()

    app = FastAPI(title="Worm Arcade API", version=__version__, lifespan=lifespan)
    app.include_router(router)
    app.include_router(ws_router)
    return app
