"""Drawing surfaces that consume paint commands."""

from __future__ import annotations

from collections import deque
from typing import Protocol


class Surface(Protocol):
    """Anything that can receive paint commands for one frame."""

    def clear(self, width: int, height: int, color: str) -> None: ...

    def fill_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: str,
        alpha: float = 1.0,
    ) -> None: ...

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        font_size: int,
        align: str = "left",
        color: str = "#000000",
    ) -> None: ...

    def present(self) -> None: ...


class RecordingSurface:
    """Surface that records each frame as a list of plain-dict commands.

    Commands accumulate until :meth:`present`, which moves them into
    ``frames`` (bounded to the most recent ``max_frames``).
    """

    def __init__(self, max_frames: int = 1) -> None:
        if max_frames < 1:
            raise ValueError("max_frames must be at least 1.")
        self.commands: list[dict] = []
        self.frames: deque[list[dict]] = deque(maxlen=max_frames)
        self.presented = 0

    def clear(self, width: int, height: int, color: str) -> None:
        self.commands.append(
            {"op": "clear", "width": width, "height": height, "color": color},
        )

    def fill_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: str,
        alpha: float = 1.0,
    ) -> None:
        self.commands.append({
            "op": "rect",
            "x": x,
            "y": y,
            "width": width,
            "height": height,
            "color": color,
            "alpha": alpha,
        })

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        font_size: int,
        align: str = "left",
        color: str = "#000000",
    ) -> None:
        self.commands.append({
            "op": "text",
            "text": text,
            "x": x,
            "y": y,
            "font_size": font_size,
            "align": align,
            "color": color,
        })

    def present(self) -> None:
        frame, self.commands = self.commands, []
        self.frames.append(frame)
        self.presented += 1

    @property
    def last_frame(self) -> list[dict]:
        return self.frames[-1] if self.frames else []

    def texts(self) -> list[str]:
        """Text labels of the last presented frame."""
        return [c["text"] for c in self.last_frame if c["op"] == "text"]
