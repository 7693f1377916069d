# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Cancellable periodic background task.

Runs an async callable every ``period_seconds`` until its stop event is
set. The first run happens one period after start. Exceptions raised by
the callable are logged and the loop carries on; only the stop event or
task cancellation end it.

Usage:
    ```python
    stop_event = asyncio.Event()
    task = PeriodicTask("vault-token-renewer", 15.0, client.renewal_tick, stop_event)
    task.start()
    ...
    await task.stop()
    ```
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Periodic asyncio task with event based cancellation.

    Several tasks may share one stop event so a single ``set()`` stops
    them all.
    """

    def __init__(
        self,
        name: str,
        period_seconds: float,
        func: Callable[[], Awaitable[object]],
        stop_event: asyncio.Event | None = None,
    ) -> None:
        if period_seconds <= 0:
            raise ValueError(f"period_seconds must be > 0, got {period_seconds}")
        self._name = name
        self._period_seconds = period_seconds
        self._func = func
        self._stop_event = stop_event or asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._tick_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def tick_count(self) -> int:
        """Number of completed runs of the callable, failed ones included."""
        return self._tick_count

    @property
    def stop_event(self) -> asyncio.Event:
        return self._stop_event

    def start(self) -> None:
        """Schedule the loop on the running event loop."""
        if self.is_running:
            logger.warning("Periodic task is already running", extra={"task": self._name})
            return
        self._task = asyncio.create_task(self._run(), name=self._name)
        logger.info(
            "Periodic task started",
            extra={"task": self._name, "period_seconds": self._period_seconds},
        )

    async def stop(self, timeout: float = 5.0) -> None:
        """Signal the loop to stop and wait for it.

        A tick in progress is given ``timeout`` seconds to finish before
        the task is cancelled.
        """
        self._stop_event.set()
        if self._task is None:
            return
        try:
            await asyncio.wait_for(asyncio.shield(self._task), timeout=timeout)
        except TimeoutError:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Periodic task stopped", extra={"task": self._name})

    async def _wait_period(self) -> bool:
        """Sleep one period. Returns True when stopped meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self._period_seconds)
        except TimeoutError:
            return False
        return True

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            if await self._wait_period():
                break
            try:
                await self._func()
            except Exception:
                logger.exception("Periodic task run failed", extra={"task": self._name})
            finally:
                self._tick_count += 1
        logger.info("Periodic task loop exited", extra={"task": self._name})


__all__ = ["PeriodicTask"]
