"""Sensor session orchestration: source selection, wiring and the UI feed."""

from datetime import tzinfo
from enum import Enum
from typing import Callable, List, Optional

import structlog

from .config import SensorConfig
from .errors import CapabilityUnavailable, PermissionDenied
from .heading_tracker import HeadingTracker
from .minute_aggregator import MinuteAggregator
from .models import (
    AccelerationSample,
    ControlState,
    DashboardUpdate,
    MinuteBucket,
    OrientationSample,
    PositionFix,
)
from .platform import Capabilities, PermissionResult, Platform
from .position_tracker import PositionTracker
from .signal_source import DeviceSignalSource, SignalSource, SimulatedSignalSource
from .step_detector import StepDetector
from .tick_sources import IntervalTicker, TickSource, wall_clock_ms

logger = structlog.get_logger(__name__)

UpdateSink = Callable[[DashboardUpdate], None]
TickerFactory = Callable[[int], TickSource]

NOTICE_NO_SENSORS = "No sensors detected. Using simulation."
NOTICE_PERMISSION_DENIED = "Motion permission denied. Using simulation."
NOTICE_PERMISSION_ERROR = "Error requesting motion permission."
NOTICE_NO_COMPASS = "No compass detected. Using simulated heading."

LABEL_IDLE = "Enable Step Counter"
LABEL_WAITING = "Waiting for Permission..."
LABEL_REAL = "Step Counter Enabled"
LABEL_SIMULATED = "Simulated Step Counter Enabled"


class SessionState(str, Enum):
    IDLE = 'idle'
    AWAITING_PERMISSION = 'awaiting_permission'
    ACTIVE_REAL = 'active_real'
    ACTIVE_SIMULATED = 'active_simulated'
    STOPPED = 'stopped'


class SensorSession:
    """
    Owns one dashboard session from the start button to teardown.

    The session probes the platform once, asks for motion permission when
    the platform requires it, and falls back to simulated motion and heading
    whenever sensors are missing or refused. Position tracking is started
    independently of that outcome. Every derived change is pushed to the UI
    sink as a DashboardUpdate snapshot.

    All callbacks run on a single asyncio event loop, so no locking is
    needed. After ``stop()`` no listener or timer fires into the session.
    """

    def __init__(
        self,
        platform: Platform,
        sink: UpdateSink,
        config: Optional[SensorConfig] = None,
        clock: Callable[[], int] = wall_clock_ms,
        ticker_factory: TickerFactory = IntervalTicker,
        tz: Optional[tzinfo] = None,
    ):
        """
        Args:
            platform: Platform adapter for probing, permission and raw feeds
            sink: Receives a DashboardUpdate after every derived change
            config: Sensor configuration (defaults if None)
            clock: Returns the current time in ms
            ticker_factory: Builds a tick source for a given interval in ms
            tz: Time zone for minute buckets (local time if None)
        """
        self.platform = platform
        self.sink = sink
        self.config = config or SensorConfig()
        self.clock = clock
        self.ticker_factory = ticker_factory
        self.tz = tz

        self.detector = StepDetector(
            window_size=self.config.WINDOW_SIZE,
            threshold=self.config.STEP_THRESHOLD,
            debounce_ms=self.config.STEP_DEBOUNCE_MS,
            gravity=self.config.GRAVITY,
        )
        self.heading = HeadingTracker()
        self.position = PositionTracker(
            platform,
            timeout_ms=self.config.POSITION_TIMEOUT_MS,
            high_accuracy=self.config.POSITION_HIGH_ACCURACY,
            maximum_age_ms=self.config.POSITION_MAXIMUM_AGE_MS,
        )
        self.aggregator = MinuteAggregator(tz=tz)

        self.state = SessionState.IDLE
        self.capabilities: Optional[Capabilities] = None
        self.source: Optional[SignalSource] = None
        self.heartbeat: Optional[TickSource] = None
        self.minute_steps = 0
        self.control = ControlState(enabled=True, label=LABEL_IDLE)
        self.notice: Optional[str] = None
        self.permission_requests = 0

    @property
    def active(self) -> bool:
        return self.state in (SessionState.ACTIVE_REAL, SessionState.ACTIVE_SIMULATED)

    @property
    def total_steps(self) -> int:
        return self.detector.step_count

    @property
    def buckets(self) -> List[MinuteBucket]:
        return self.aggregator.buckets

    async def start(self) -> SessionState:
        """
        Handle the user's start request.

        Returns:
            The state the session settled in
        """
        if self.state is not SessionState.IDLE:
            logger.warning("start_ignored", state=self.state.value)
            return self.state

        self._transition(SessionState.AWAITING_PERMISSION)
        self.control = ControlState(enabled=False, label=LABEL_WAITING)
        self._publish()

        self.capabilities = self.platform.probe()
        logger.info(
            "capabilities_probed",
            motion=self.capabilities.motion_available,
            orientation=self.capabilities.orientation_available,
            permission_required=self.capabilities.permission_required,
            geolocation=self.capabilities.geolocation_available,
        )

        try:
            source = await self._select_source(self.capabilities)
        except (PermissionDenied, CapabilityUnavailable) as e:
            if self.state is SessionState.STOPPED:
                return self.state
            logger.info("using_simulation", reason=str(e))
            self.notice = str(e)
            source = self._simulated_source()

        if self.state is SessionState.STOPPED:
            logger.info("start_abandoned_after_stop")
            return self.state

        self._activate(source)
        return self.state

    def stop(self) -> None:
        """Tear down every listener and timer. The session cannot be restarted."""
        if self.state is SessionState.STOPPED:
            return
        if self.source is not None:
            self.source.stop()
        if self.heartbeat is not None:
            self.heartbeat.stop()
        self.position.stop()
        self._transition(SessionState.STOPPED)

    def snapshot(self) -> DashboardUpdate:
        """Current derived values as a DashboardUpdate."""
        return DashboardUpdate(
            step_count=self.total_steps,
            minute_steps=self.minute_steps,
            compass=self.heading.state,
            position=self.position.fix,
            buckets=list(self.aggregator.buckets),
            control=self.control,
            notice=self.notice,
            simulated=self.state is SessionState.ACTIVE_SIMULATED,
        )

    async def _select_source(self, capabilities: Capabilities) -> SignalSource:
        if not capabilities.motion_available:
            raise CapabilityUnavailable(NOTICE_NO_SENSORS)
        if capabilities.permission_required:
            await self._request_permission()
        return DeviceSignalSource(self.platform, orientation=capabilities.orientation_available)

    async def _request_permission(self) -> None:
        self.permission_requests += 1
        try:
            result = await self.platform.request_permission()
        except Exception as e:
            logger.error("permission_request_failed", error=repr(e))
            raise PermissionDenied(NOTICE_PERMISSION_ERROR) from e
        if result is not PermissionResult.GRANTED:
            raise PermissionDenied(NOTICE_PERMISSION_DENIED)

    def _simulated_source(self, motion: bool = True) -> SimulatedSignalSource:
        return SimulatedSignalSource(
            motion_ticker=self.ticker_factory(self.config.SIM_MOTION_INTERVAL_MS) if motion else None,
            heading_ticker=self.ticker_factory(self.config.SIM_HEADING_INTERVAL_MS),
            clock=self.clock,
            step_probability=self.config.SIM_STEP_PROBABILITY,
            step_spike=self.config.SIM_STEP_SPIKE,
            gravity=self.config.GRAVITY,
            heading_step=self.config.SIM_HEADING_STEP,
            seed=self.config.SIM_SEED,
        )

    def _activate(self, source: SignalSource) -> None:
        if isinstance(source, DeviceSignalSource) and not source.orientation:
            logger.info("using_simulated_heading")
            self.notice = NOTICE_NO_COMPASS
            source.heading_fallback = self._simulated_source(motion=False)

        try:
            source.start(self._on_acceleration, self._on_orientation)
        except CapabilityUnavailable as e:
            # Probe said yes but the feed could not be opened
            source.stop()
            logger.warning("device_source_failed", error=str(e))
            self.notice = NOTICE_NO_SENSORS
            source = self._simulated_source()
            source.start(self._on_acceleration, self._on_orientation)

        self.source = source
        if source.simulated:
            self._transition(SessionState.ACTIVE_SIMULATED)
            self.control = ControlState(enabled=False, label=LABEL_SIMULATED)
        else:
            self._transition(SessionState.ACTIVE_REAL)
            self.control = ControlState(enabled=False, label=LABEL_REAL)

        # Minute history starts at activation
        self.aggregator = MinuteAggregator(start_ms=self.clock(), tz=self.tz)
        self.heartbeat = self.ticker_factory(self.config.HEARTBEAT_INTERVAL_MS)
        self.heartbeat.start(self._on_heartbeat)
        self.position.start(self._on_position)
        self._publish()

    def _on_acceleration(self, sample: AccelerationSample) -> None:
        if not self.active:
            return
        if self.detector.ingest(sample) is not None:
            self.minute_steps += 1
            self._publish()

    def _on_orientation(self, sample: OrientationSample) -> None:
        if not self.active:
            return
        if self.heading.ingest(sample) is not None:
            self._publish()

    def _on_heartbeat(self) -> None:
        if not self.active:
            return
        if self.aggregator.on_tick(self.clock(), self.minute_steps) is not None:
            self.minute_steps = 0
            self._publish()

    def _on_position(self, fix: PositionFix) -> None:
        if not self.active:
            return
        self._publish()

    def _transition(self, new_state: SessionState) -> None:
        logger.info("session_state_changed", previous=self.state.value, current=new_state.value)
        self.state = new_state

    def _publish(self) -> None:
        self.sink(self.snapshot())
