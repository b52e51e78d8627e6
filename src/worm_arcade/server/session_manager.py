"""In-memory session registry and the streaming surface behind it."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket

from worm_arcade.config import GameConfig
from worm_arcade.game import WormGame
from worm_arcade.scheduler import AsyncioScheduler
from worm_arcade.server.models import SessionSummary
from worm_arcade.surface import RecordingSurface

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 50


class SessionLimitError(Exception):
    """Raised when the registry already holds its maximum of sessions."""


class StreamingSurface(RecordingSurface):
    """Recording surface that hands each presented frame to one reader.

    Only the newest frame is kept: a reader that falls behind skips
    straight to the latest one.
    """

    def __init__(self) -> None:
        super().__init__(max_frames=1)
        self._queue: asyncio.Queue[list[dict]] | None = None

    def open(self) -> None:
        """Start buffering frames for a reader on the running loop."""
        self._queue = asyncio.Queue(maxsize=1)

    def close(self) -> None:
        self._queue = None

    def present(self) -> None:
        super().present()
        queue = self._queue
        if queue is None:
            return
        if queue.full():
            queue.get_nowait()
        queue.put_nowait(self.last_frame)

    async def next_frame(self) -> list[dict]:
        if self._queue is None:
            raise RuntimeError("Surface is not open.")
        return await self._queue.get()


@dataclass
class GameSession:
    """One game plus the transport state of its (single) player."""

    session_id: str
    game: WormGame
    surface: StreamingSurface
    created_at: float = field(default_factory=time.monotonic)
    websocket: WebSocket | None = None

    @property
    def connected(self) -> bool:
        return self.websocket is not None

    def summary(self) -> SessionSummary:
        game = self.game
        return SessionSummary(
            session_id=self.session_id,
            state=game.state.value,
            score=game.score,
            fps=game.fps,
            connected=self.connected,
            columns=game.config.columns,
            rows=game.config.rows,
        )


class SessionManager:
    """Central registry managing all game sessions.

    A session's loops run only while a player is attached; detaching stops
    them cooperatively and the game keeps its state until the next attach.
    """

    def __init__(self, max_sessions: int = _MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1.")
        self._sessions: dict[str, GameSession] = {}
        self._max_sessions = max_sessions

    def create_session(self, config: GameConfig) -> GameSession:
        """Create a paused game and return its session."""
        if len(self._sessions) >= self._max_sessions:
            raise SessionLimitError(
                f"Session limit of {self._max_sessions} reached.",
            )
        session_id = uuid.uuid4().hex[:12]
        surface = StreamingSurface()
        game = WormGame(
            surface,
            config=config,
            scheduler=AsyncioScheduler(config.refresh_rate),
            logger=logging.getLogger(f"{__name__}.{session_id}"),
        )
        session = GameSession(session_id=session_id, game=game, surface=surface)
        self._sessions[session_id] = session
        logger.info("Session %s created.", session_id)
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def remove_session(self, session_id: str) -> GameSession:
        """Drop a session, closing its player's socket with code 4008."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._shut_down(session, "Session removed.")
        logger.info("Session %s removed.", session_id)
        return session

    def attach(self, session: GameSession, websocket: WebSocket) -> None:
        """Bind a player socket and start the game loops on this event loop."""
        if session.websocket is not None:
            raise ValueError("Session already has a player.")
        session.websocket = websocket
        session.surface.open()
        session.game.start()
        logger.info("Player attached to session %s.", session.session_id)

    def detach(self, session: GameSession, websocket: WebSocket) -> None:
        """Release the player socket and stop the loops."""
        if session.websocket is not websocket:
            return
        session.websocket = None
        session.game.stop()
        session.surface.close()
        logger.info("Player detached from session %s.", session.session_id)

    @staticmethod
    async def _shut_down(session: GameSession, reason: str) -> None:
        websocket, session.websocket = session.websocket, None
        session.game.stop()
        session.surface.close()
        if websocket is not None:
            await websocket.close(code=4008, reason=reason)

    async def cleanup(self) -> None:
        """Stop every game and cancel loops still waiting to wake up."""
        for session in self._sessions.values():
            await self._shut_down(session, "Server shutting down.")
            scheduler = session.game.scheduler
            if isinstance(scheduler, AsyncioScheduler):
                await scheduler.cancel()
        self._sessions.clear()
        logger.info("SessionManager cleanup complete.")
