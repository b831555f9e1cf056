# backend/livedash/engine/scheduler.py
"""
Tick scheduler.

One asyncio task per scheduler drives ``store.advance()`` on a fixed
interval. Ticks run on the event loop thread one after another; ``stop``
cancels and awaits the task, and once it returns the store is never
advanced by this scheduler again.
"""
from __future__ import annotations

import asyncio
import logging
import math
from typing import Optional

from .errors import ConfigurationError, SchedulerStateError
from .store import MetricsStateStore

logger = logging.getLogger(__name__)


class TickScheduler:
    def __init__(self, store: MetricsStateStore, interval: float):
        if not isinstance(interval, (int, float)) or not math.isfinite(interval) or interval <= 0:
            raise ConfigurationError(f"tick interval must be positive, got {interval}")
        self.store = store
        self.interval = float(interval)
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._ticks = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        """Advances driven by this scheduler across all of its runs."""
        return self._ticks

    def start(self) -> None:
        if self.is_running:
            raise SchedulerStateError("tick scheduler already running; stop it first")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise SchedulerStateError("tick scheduler needs a running event loop") from e
        self._stop_event = asyncio.Event()
        self._task = loop.create_task(self._run(self._stop_event), name="livedash-tick-scheduler")
        self._task.add_done_callback(_collect_failure)
        logger.info("tick scheduler started (interval=%.3fs)", self.interval)

    async def stop(self) -> None:
        task, stop_event = self._task, self._stop_event
        self._task = None
        self._stop_event = None
        if task is None:
            return
        if stop_event is not None:
            stop_event.set()
        # A task halted by a failed tick was already reported by _collect_failure.
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("tick scheduler stopped after %d ticks", self._ticks)

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
            if stop_event.is_set():
                break
            self._tick()

    def _tick(self) -> None:
        try:
            snap = self.store.advance()
        except Exception:
            logger.exception("tick %d failed; scheduler halting", self._ticks + 1)
            raise
        self._ticks += 1
        logger.debug("scheduler tick %d -> snapshot %d", self._ticks, snap.tick)


def _collect_failure(task: asyncio.Task) -> None:
    # Retrieve the exception so an unstopped, halted task doesn't warn at GC.
    if not task.cancelled() and task.exception() is not None:
        logger.error("tick scheduler task ended: %s", task.exception())
