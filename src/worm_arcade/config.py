"""Game configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Board geometry, pacing, and behaviour switches for one game.

    The canvas is split into the playable board and a status bar along the
    bottom edge. Board dimensions must be whole multiples of ``scale`` so
    that grid cells tile the board exactly.
    """

    # Canvas (pixels)
    canvas_width: int = 200
    canvas_height: int = 220
    status_bar_height: int = 20
    scale: int = 10

    # Pacing
    base_fps: float = 10.0
    fps_step: float = 0.25
    refresh_rate: float = 60.0
    fps_sample_window: float = 1.0

    # Starting worm (grid cells)
    start_x: int = 10
    start_y: int = 10
    start_length: int = 3

    # Behaviour
    apple_avoids_worm: bool = True
    contain_faults: bool = True
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.scale < 1:
            raise ValueError("scale must be at least 1.")
        if self.canvas_width < 1 or self.board_height < 1:
            raise ValueError("Board must be at least 1 pixel in each dimension.")
        if self.status_bar_height < 0:
            raise ValueError("status_bar_height must be >= 0.")
        if self.board_width % self.scale or self.board_height % self.scale:
            raise ValueError("Board dimensions must be multiples of scale.")
        if self.base_fps <= 0:
            raise ValueError("base_fps must be positive.")
        if self.fps_step < 0:
            raise ValueError("fps_step must be >= 0.")
        if self.refresh_rate <= 0:
            raise ValueError("refresh_rate must be positive.")
        if self.fps_sample_window <= 0:
            raise ValueError("fps_sample_window must be positive.")
        if self.start_length < 1:
            raise ValueError("start_length must be at least 1.")
        tail_x = self.start_x - (self.start_length - 1)
        if not (0 <= tail_x and self.start_x < self.columns):
            raise ValueError("Starting worm must fit on the board.")
        if not 0 <= self.start_y < self.rows:
            raise ValueError("Starting worm must fit on the board.")

    @property
    def board_width(self) -> int:
        return self.canvas_width

    @property
    def board_height(self) -> int:
        return self.canvas_height - self.status_bar_height

    @property
    def columns(self) -> int:
        return self.board_width // self.scale

    @property
    def rows(self) -> int:
        return self.board_height // self.scale

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
