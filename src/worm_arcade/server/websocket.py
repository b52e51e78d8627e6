"""WebSocket handler: key symbols in, rendered frames out."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from worm_arcade.server.models import KeyMessage
from worm_arcade.server.session_manager import GameSession, SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _dumps(payload: dict) -> str:
    return json.dumps(payload, separators=(",", ":"))


def _parse_key(raw: str) -> str | None:
    """Extract the key symbol from a message, or None if malformed."""
    try:
        return KeyMessage.model_validate_json(raw).key
    except ValidationError:
        return None


async def _stream_frames(websocket: WebSocket, session: GameSession) -> None:
    """Forward every presented frame until the socket goes away."""
    while True:
        commands = await session.surface.next_frame()
        game = session.game
        await websocket.send_text(_dumps({
            "type": "frame",
            "frame": game.frame_count,
            "state": game.state.value,
            "score": game.score,
            "commands": commands,
        }))


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send key symbols, receive a frame per render tick."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return
    if session.connected:
        await websocket.close(code=4009, reason="Session already has a player.")
        return

    # Claim the session before the first await so a concurrent connect
    # sees it as taken.
    manager.attach(session, websocket)
    sender: asyncio.Task | None = None
    try:
        await websocket.accept()
        # Send an initial snapshot so the client gets immediate feedback.
        await websocket.send_text(
            _dumps({"type": "snapshot", **session.game.snapshot()}),
        )
        sender = asyncio.create_task(_stream_frames(websocket, session))

        while True:
            raw = await websocket.receive_text()
            key = _parse_key(raw)
            if key is None:
                continue
            session.game.handle_key(key)
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    finally:
        if sender is not None:
            sender.cancel()
            await asyncio.gather(sender, return_exceptions=True)
        manager.detach(session, websocket)
