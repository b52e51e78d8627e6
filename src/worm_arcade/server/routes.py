"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from worm_arcade.config import GameConfig
from worm_arcade.server.models import CreateSessionRequest, SessionSummary
from worm_arcade.server.session_manager import SessionLimitError, SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])

STATUS_BAR_HEIGHT = 20


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _config_from_request(body: CreateSessionRequest) -> GameConfig:
    return GameConfig(
        canvas_width=body.columns * body.scale,
        canvas_height=body.rows * body.scale + STATUS_BAR_HEIGHT,
        status_bar_height=STATUS_BAR_HEIGHT,
        scale=body.scale,
        base_fps=body.base_fps,
        start_x=body.columns // 2,
        start_y=body.rows // 2,
        start_length=body.start_length,
        apple_avoids_worm=body.apple_avoids_worm,
        seed=body.seed,
    )


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new paused game session."""
    manager = _get_manager(request)
    try:
        config = _config_from_request(body)
        session = manager.create_session(config)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SessionLimitError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List every live session."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the full game snapshot."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    result = session.summary().model_dump()
    result["snapshot"] = session.game.snapshot()
    return result


@router.delete("/{session_id}")
async def delete_session(session_id: str, request: Request) -> dict:
    """Stop a session and drop it from the registry."""
    try:
        await _get_manager(request).remove_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "removed", "session_id": session_id}
