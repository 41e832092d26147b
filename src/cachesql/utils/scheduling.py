"""Background scheduling for cache sweeps.

A :class:`SweepScheduler` runs one coroutine function periodically and on
demand. On-demand requests are debounced on the leading edge, and every
run goes through a single-flight guard so two sweeps never overlap.
"""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta

logger = logging.getLogger(__name__)


class SweepScheduler:
    """Owns the timers that trigger a backend's sweep.

    Created and started when the backend is activated, stopped when it is
    destroyed. Nothing runs after :meth:`stop` returns.
    """

    def __init__(
        self,
        sweep: Callable[[], Awaitable[None]],
        interval: timedelta,
        debounce: timedelta,
        name: str = "sweep",
    ) -> None:
        """Initialize the scheduler.

        Args:
            sweep: Coroutine function performing one sweep pass.
            interval: Period of the background sweep.
            debounce: Window during which repeated requests are dropped.
                Zero disables :meth:`request`.
            name: Name used in task names and log messages.
        """
        self._sweep = sweep
        self._interval = interval.total_seconds()
        self._debounce = debounce.total_seconds()
        self._name = name
        self._periodic: asyncio.Task[None] | None = None
        self._in_flight: asyncio.Task[None] | None = None
        self._suppress_until = 0.0
        self._stopped = False

    @property
    def running(self) -> bool:
        """Check whether the periodic sweep is scheduled."""
        return self._periodic is not None and not self._periodic.done()

    def start(self) -> None:
        """Schedule the periodic sweep on the running event loop."""
        if self._stopped:
            raise RuntimeError(f"{self._name}: scheduler has been stopped")
        if self.running:
            return
        self._periodic = asyncio.get_running_loop().create_task(
            self._run_periodically(), name=f"{self._name}-periodic"
        )

    def request(self) -> None:
        """Ask for a sweep without waiting for it.

        The first request of a burst sweeps immediately; later requests
        within the debounce window, or while a sweep is running, are
        dropped. The periodic sweep picks up anything they would have
        removed.
        """
        if self._stopped or self._debounce <= 0:
            return
        loop = asyncio.get_running_loop()
        now = loop.time()
        if now < self._suppress_until or self._is_in_flight():
            return
        self._suppress_until = now + self._debounce
        self._launch(loop)

    async def run_now(self) -> None:
        """Sweep now, joining a sweep that is already running."""
        if self._stopped:
            return
        task = self._in_flight
        if task is None or task.done():
            task = self._launch(asyncio.get_running_loop())
        await asyncio.shield(task)

    async def stop(self) -> None:
        """Cancel the periodic and any pending sweep, and wait for them."""
        self._stopped = True
        tasks = [t for t in (self._periodic, self._in_flight) if t is not None]
        self._periodic = None
        self._in_flight = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _is_in_flight(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    def _launch(self, loop: asyncio.AbstractEventLoop) -> "asyncio.Task[None]":
        task = loop.create_task(self._run_once(), name=f"{self._name}-run")
        self._in_flight = task
        return task

    async def _run_once(self) -> None:
        try:
            await self._sweep()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("%s: sweep failed", self._name)

    async def _run_periodically(self) -> None:
        while not self._stopped:
            await asyncio.sleep(self._interval)
            await self.run_now()
