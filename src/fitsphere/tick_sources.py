"""
Pluggable timers for the sensor session.

Simulated sensors and the minute heartbeat are driven by tick sources so
that tests can advance them by hand instead of waiting on real time.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

TickCallback = Callable[[], None]


def wall_clock_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class TickSource(ABC):
    """Calls a callback repeatedly until stopped."""

    @abstractmethod
    def start(self, callback: TickCallback) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @property
    @abstractmethod
    def running(self) -> bool:
        ...


class IntervalTicker(TickSource):
    """Ticks every ``interval_ms`` on the running asyncio event loop."""

    def __init__(self, interval_ms: int):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self._task: Optional[asyncio.Task] = None

    def start(self, callback: TickCallback) -> None:
        if self.running:
            raise RuntimeError("Ticker already started")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(callback))

    async def _run(self, callback: TickCallback) -> None:
        interval = self.interval_ms / 1000.0
        while True:
            await asyncio.sleep(interval)
            try:
                callback()
            except Exception:
                logger.exception("tick_callback_failed", interval_ms=self.interval_ms)

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


class ManualTicker(TickSource):
    """Ticks only when ``tick()`` is called."""

    def __init__(self):
        self._callback: Optional[TickCallback] = None

    def start(self, callback: TickCallback) -> None:
        if self.running:
            raise RuntimeError("Ticker already started")
        self._callback = callback

    def tick(self, count: int = 1) -> None:
        for _ in range(count):
            if self._callback is None:
                return
            self._callback()

    def stop(self) -> None:
        self._callback = None

    @property
    def running(self) -> bool:
        return self._callback is not None
