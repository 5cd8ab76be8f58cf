"""Continuous position tracking with a bounded wait for each fix."""

import asyncio
from typing import Any, Callable, Mapping, Optional

import structlog

from .errors import CapabilityUnavailable, PositionUnavailable, SensorReadError
from .models import PositionFix, PositionStatus
from .platform import Platform, PositionWatchOptions, Unsubscribe

logger = structlog.get_logger(__name__)

PositionCallback = Callable[[PositionFix], None]


class PositionTracker:
    """
    Watches the platform's location feed and reports each new fix.

    Each fix replaces the previous one; no history is kept. If no fix arrives
    within ``timeout_ms`` of starting (or of the previous fix) the tracker
    reports an unavailable state instead of staying silent, and keeps
    watching so a later fix can still resolve it.
    """

    def __init__(
        self,
        platform: Platform,
        timeout_ms: int = 5000,
        high_accuracy: bool = True,
        maximum_age_ms: int = 0,
    ):
        self.platform = platform
        self.options = PositionWatchOptions(
            high_accuracy=high_accuracy,
            timeout_ms=timeout_ms,
            maximum_age_ms=maximum_age_ms,
        )
        self.fix: Optional[PositionFix] = None
        self.last_error: Optional[PositionUnavailable] = None
        self.running = False
        self._callback: Optional[PositionCallback] = None
        self._unsubscribe: Optional[Unsubscribe] = None
        self._timeout_handle: Optional[asyncio.TimerHandle] = None

    def start(self, callback: PositionCallback) -> None:
        """
        Begin continuous tracking. Must be called from the running event loop.

        Args:
            callback: Invoked with every resolved fix or failure state
        """
        if self.running:
            raise RuntimeError("Position tracking already started")
        self._callback = callback
        self.running = True

        try:
            self._unsubscribe = self.platform.watch_position(
                self._handle_fix, self._handle_error, self.options
            )
        except CapabilityUnavailable as e:
            logger.info("geolocation_unsupported", reason=str(e))
            self._report(PositionFix.failed(PositionStatus.UNSUPPORTED, str(e)))
            return

        self._arm_timeout()

    def stop(self) -> None:
        """Cancel the watch and the pending timeout."""
        self.running = False
        self._cancel_timeout()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._callback = None

    def _handle_fix(self, raw: Mapping[str, Any]) -> None:
        if not self.running:
            return
        try:
            fix = PositionFix.from_raw(raw)
        except SensorReadError as e:
            logger.warning("position_fix_dropped", error=str(e))
            return
        self._arm_timeout()
        self._report(fix)

    def _handle_error(self, error: PositionUnavailable) -> None:
        if not self.running:
            return
        # The platform's own watch decides when to retry after an error.
        self._cancel_timeout()
        self._fail(error)

    def _on_timeout(self) -> None:
        self._timeout_handle = None
        if not self.running:
            return
        self._fail(PositionUnavailable(
            f"No position fix within {self.options.timeout_ms} ms",
            code=PositionUnavailable.TIMEOUT,
        ))
        self._arm_timeout()

    def _fail(self, error: PositionUnavailable) -> None:
        self.last_error = error
        status = PositionStatus.DENIED if error.denied else PositionStatus.UNAVAILABLE
        logger.warning("position_error", status=status.value, code=error.code, reason=error.reason)
        self._report(PositionFix.failed(status, error.reason))

    def _arm_timeout(self) -> None:
        self._cancel_timeout()
        loop = asyncio.get_running_loop()
        self._timeout_handle = loop.call_later(self.options.timeout_ms / 1000.0, self._on_timeout)

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def _report(self, fix: PositionFix) -> None:
        # Repeated identical failures are not re-announced
        if not fix.resolved and self.fix is not None and self.fix.status is fix.status:
            self.fix = fix
            return
        self.fix = fix
        if self._callback is not None:
            self._callback(fix)
