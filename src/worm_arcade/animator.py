"""Dual-loop animation engine: fixed-rate logic, free-running render."""

from __future__ import annotations

import logging
from collections.abc import Callable

from worm_arcade.log import trace
from worm_arcade.scheduler import AsyncioScheduler, CancelToken, Scheduler

FrameListener = Callable[[], None]


class Animator:
    """Drives a logic loop and a render loop on a :class:`Scheduler`.

    The logic loop runs every ``1 / fps`` seconds, re-reading ``fps`` after
    each tick so rate changes take effect on the next tick without a
    restart. Each tick bumps ``frame_count``, calls :meth:`frame`, then the
    frame listeners in registration order. The render loop calls
    :meth:`render` on every presentation refresh.

    :meth:`stop` is cooperative: both loops notice it at their next
    wake-up. A later :meth:`start` keeps counting frames from where the
    previous run left off.

    With ``contain_faults`` an exception from a callback is logged and the
    loop carries on; otherwise it propagates and ends that loop only.
    """

    def __init__(
        self,
        fps: float = 30.0,
        scheduler: Scheduler | None = None,
        logger: logging.Logger | None = None,
        contain_faults: bool = True,
    ) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive.")
        self.fps = fps
        self.scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.contain_faults = contain_faults
        self.frame_count = 0
        self.faults = 0
        self.frame_listeners: list[FrameListener] = []
        self._token: CancelToken | None = None

    @property
    def running(self) -> bool:
        return self._token is not None and self._token.active

    @property
    def frame_interval(self) -> float:
        """Seconds between logic ticks at the current rate."""
        return 1.0 / self.fps

    def start(self) -> None:
        if self.running:
            self.logger.warning("Animator already running; ignoring start().")
            return
        self._token = CancelToken()
        self.scheduler.run_on_refresh(self._render_step, self._token)
        self.scheduler.run_periodically(
            lambda: self.frame_interval, self._logic_step, self._token,
        )

    def stop(self) -> None:
        if self._token is not None:
            self._token.cancel()

    def frame(self, frame_count: int) -> None:
        """Game logic for one tick. Override in subclasses."""

    def render(self, frame_count: int) -> None:
        """Paint the current state. Override in subclasses."""

    def add_frame_listener(self, listener: FrameListener) -> None:
        self.frame_listeners.append(listener)

    def remove_frame_listener(self, listener: FrameListener) -> None:
        self.frame_listeners.remove(listener)

    def _logic_step(self) -> None:
        trace(self.logger, "Running a game loop")
        self.frame_count += 1
        self._guarded(self.frame, self.frame_count)
        trace(self.logger, "Calling frame listeners")
        for listener in list(self.frame_listeners):
            self._guarded(listener)

    def _render_step(self) -> None:
        trace(self.logger, "Rendering")
        self._guarded(self.render, self.frame_count)

    def _guarded(self, callback: Callable[..., None], *args: int) -> None:
        if not self.contain_faults:
            callback(*args)
            return
        try:
            callback(*args)
        except Exception:
            self.faults += 1
            self.logger.exception(
                "Callback %r failed at frame %d.", callback, self.frame_count,
            )
