"""Loop schedulers used by the animator.

A scheduler runs a loop body repeatedly until the body's cancellation token
is cancelled. The token is checked at every wake-up, so cancelling never
interrupts a body that is already executing.
"""

from __future__ import annotations

import abc
import asyncio
import heapq
import itertools
import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

Body = Callable[[], None]
Interval = Callable[[], float]


class CancelToken:
    """Cooperative cancellation flag shared by the loops of one run."""

    def __init__(self) -> None:
        self.active = True

    def cancel(self) -> None:
        self.active = False


class Scheduler(abc.ABC):
    """Runs loop bodies until their token is cancelled."""

    @abc.abstractmethod
    def run_periodically(
        self, interval: Interval, body: Body, token: CancelToken,
    ) -> None:
        """Run *body* now, then again after ``interval()`` seconds.

        ``interval`` is re-evaluated after every run so rate changes apply
        to the next scheduling decision.
        """

    @abc.abstractmethod
    def run_on_refresh(self, body: Body, token: CancelToken) -> None:
        """Run *body* on every presentation refresh."""

    def clock(self) -> float:
        """Seconds on the clock that drives this scheduler's loops."""
        return time.monotonic()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by tasks on the running asyncio event loop.

    The refresh signal is approximated by sleeping ``1 / refresh_rate``
    seconds between renders.
    """

    def __init__(self, refresh_rate: float = 60.0) -> None:
        if refresh_rate <= 0:
            raise ValueError("refresh_rate must be positive.")
        self.refresh_rate = refresh_rate
        self._tasks: list[asyncio.Task] = []

    def run_periodically(
        self, interval: Interval, body: Body, token: CancelToken,
    ) -> None:
        self._spawn(self._periodic(interval, body, token))

    def run_on_refresh(self, body: Body, token: CancelToken) -> None:
        self._spawn(self._periodic(lambda: 1.0 / self.refresh_rate, body, token))

    def _spawn(self, coro) -> None:
        self._tasks = [t for t in self._tasks if not t.done()]
        self._tasks.append(asyncio.get_running_loop().create_task(coro))

    @staticmethod
    async def _periodic(interval: Interval, body: Body, token: CancelToken) -> None:
        while token.active:
            body()
            await asyncio.sleep(interval())

    @property
    def pending(self) -> int:
        """Number of loop tasks that have not finished yet."""
        return sum(1 for t in self._tasks if not t.done())

    async def join(self) -> None:
        """Wait for every loop to finish, re-raising the first loop fault."""
        tasks, self._tasks = self._tasks, []
        if tasks:
            await asyncio.gather(*tasks)

    async def cancel(self) -> None:
        """Hard-cancel all loops. Only meant for process shutdown."""
        loop = asyncio.get_running_loop()
        tasks = [t for t in self._tasks if not t.done() and t.get_loop() is loop]
        self._tasks = []
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("Cancelled %d loop tasks.", len(tasks))


class ManualScheduler(Scheduler):
    """Deterministic scheduler driven by a virtual clock.

    Nothing runs until :meth:`advance` is called. Loops registered at time
    ``t`` first run at ``t``; a body that raises ends its own loop and the
    exception propagates out of :meth:`advance`.
    """

    _EPSILON = 1e-9

    def __init__(self, refresh_rate: float = 60.0) -> None:
        if refresh_rate <= 0:
            raise ValueError("refresh_rate must be positive.")
        self.refresh_rate = refresh_rate
        self.now = 0.0
        self._order = itertools.count()
        self._queue: list[tuple[float, int, Interval, Body, CancelToken]] = []

    def run_periodically(
        self, interval: Interval, body: Body, token: CancelToken,
    ) -> None:
        heapq.heappush(
            self._queue, (self.now, next(self._order), interval, body, token),
        )

    def run_on_refresh(self, body: Body, token: CancelToken) -> None:
        self.run_periodically(lambda: 1.0 / self.refresh_rate, body, token)

    def clock(self) -> float:
        return self.now

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if entry[4].active)

    def advance(self, seconds: float = 0.0) -> int:
        """Move the clock forward, running every due body in time order.

        Returns the number of bodies executed.
        """
        if seconds < 0:
            raise ValueError("Cannot advance the clock backwards.")
        deadline = self.now + seconds
        runs = 0
        while self._queue and self._queue[0][0] <= deadline + self._EPSILON:
            due, _, interval, body, token = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if not token.active:
                continue
            body()
            runs += 1
            heapq.heappush(
                self._queue,
                (due + interval(), next(self._order), interval, body, token),
            )
        self.now = deadline
        return runs
