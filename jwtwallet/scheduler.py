"""Periodic callbacks on the running event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[Any]]


class PeriodicTask:
    """Run ``callback`` every ``interval_seconds`` until stopped.

    The first call happens one interval after :meth:`start`. A failing tick
    is logged and does not stop later ticks.
    """

    def __init__(self, name: str, interval_seconds: float, callback: Callback) -> None:
        self.name = name
        self.interval_seconds = interval_seconds
        self._callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self._callback()
            except Exception:
                logger.exception("Periodic task %s failed", self.name)
