"""Periodic and visibility-driven refresh of a single feed."""

import asyncio
from typing import Awaitable, Callable

import structlog

from storefront.listings.visibility import Subscription, VisibilitySignal

logger = structlog.get_logger(__name__)

DEFAULT_REFRESH_INTERVAL = 30.0

Trigger = Callable[[], Awaitable[None]]


class RefreshScheduler:
    """Re-runs ``trigger`` on start, every ``interval`` seconds, and whenever
    the page becomes visible again.

    Triggered fetches run as independent tasks; the scheduler never waits on
    them. ``stop`` releases the timer and the visibility subscription once and
    prevents any further trigger, but leaves in-flight fetches running.
    """

    def __init__(
        self,
        trigger: Trigger,
        visibility: VisibilitySignal,
        interval: float = DEFAULT_REFRESH_INTERVAL,
        name: str = "feed",
    ):
        self._trigger = trigger
        self._visibility = visibility
        self._interval = interval
        self._name = name
        self._timer: asyncio.Task | None = None
        self._subscription: Subscription | None = None
        self._in_flight: set[asyncio.Task] = set()
        self._running = False
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def start(self) -> None:
        if self._running or self._stopped:
            return
        self._running = True
        self._fire("mount")
        self._timer = asyncio.create_task(self._tick())
        self._subscription = self._visibility.subscribe(self._on_visibility_change)
        logger.info("scheduler_started", feed=self._name, interval=self._interval)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        logger.info("scheduler_stopped", feed=self._name, in_flight=self.in_flight)

    async def _tick(self) -> None:
        while self._running:
            await asyncio.sleep(self._interval)
            self._fire("interval")

    def _on_visibility_change(self, hidden: bool) -> None:
        if not hidden:
            self._fire("visible")

    def _fire(self, reason: str) -> None:
        if not self._running:
            return
        logger.debug("scheduler_trigger", feed=self._name, reason=reason)
        task = asyncio.create_task(self._run())
        self._in_flight.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "scheduler_trigger_failed",
                feed=self._name,
                error=repr(exc),
                exc_info=exc,
            )

    async def _run(self) -> None:
        # A task scheduled just before stop() must not begin a fetch
        if not self._running:
            return
        await self._trigger()
