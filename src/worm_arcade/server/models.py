"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    columns: int = Field(default=20, ge=4, le=100)
    rows: int = Field(default=20, ge=4, le=100)
    scale: int = Field(default=10, ge=1, le=50)
    base_fps: float = Field(default=10.0, gt=0, le=60)
    start_length: int = Field(default=3, ge=1)
    apple_avoids_worm: bool = True
    seed: int | None = None


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    state: str
    score: int
    fps: float
    connected: bool
    columns: int
    rows: int


class KeyMessage(BaseModel):
    """Inbound WebSocket message carrying one key symbol."""

    key: str = Field(min_length=1, max_length=32)
