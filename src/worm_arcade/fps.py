"""Measured frame-rate counter, fed by the animator's frame listeners."""

from __future__ import annotations

import time
from collections.abc import Callable


class FpsMeter:
    """Counts frames and publishes the measured rate once per window.

    ``current_fps`` is ``-1.0`` until the first full window has elapsed.
    """

    def __init__(
        self,
        window: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window <= 0:
            raise ValueError("window must be positive.")
        self.window = window
        self.clock = clock
        self.current_fps = -1.0
        self.frames = 0
        self.last = clock()

    def reset(self) -> None:
        self.current_fps = -1.0
        self.frames = 0
        self.last = self.clock()

    def frame(self) -> None:
        """Record one frame; publish a new sample if the window elapsed."""
        self.frames += 1
        now = self.clock()
        elapsed = now - self.last
        if elapsed >= self.window:
            self.current_fps = self.frames / elapsed
            self.frames = 0
            self.last = now

    __call__ = frame
