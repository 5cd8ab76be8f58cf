"""
Sources of raw motion and orientation samples.

The session picks exactly one source when it starts: the device feed when
sensors are present and permitted, otherwise the synthetic generator.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional

import numpy as np
import structlog

from .errors import SensorReadError
from .models import AccelerationSample, OrientationSample
from .platform import Platform, Unsubscribe
from .tick_sources import TickSource, wall_clock_ms

logger = structlog.get_logger(__name__)

AccelerationCallback = Callable[[AccelerationSample], None]
OrientationCallback = Callable[[OrientationSample], None]


class SignalSource(ABC):
    """Pushes acceleration and orientation samples to the session."""

    simulated = False

    @abstractmethod
    def start(self, on_acceleration: AccelerationCallback, on_orientation: OrientationCallback) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...


class DeviceSignalSource(SignalSource):
    """
    Live samples from the platform's sensor feeds.

    Malformed payloads are dropped one at a time so a bad reading never
    interrupts the stream. When the device has no orientation feed, headings
    come from ``heading_fallback`` instead.
    """

    def __init__(
        self,
        platform: Platform,
        orientation: bool = True,
        heading_fallback: Optional[SignalSource] = None,
    ):
        """
        Args:
            platform: Platform adapter providing the raw feeds
            orientation: Subscribe to the orientation feed as well as motion
            heading_fallback: Heading-only source used when orientation is False
        """
        self.platform = platform
        self.orientation = orientation
        self.heading_fallback = heading_fallback
        self.dropped_samples = 0
        self._subscriptions: List[Unsubscribe] = []

    def start(self, on_acceleration: AccelerationCallback, on_orientation: OrientationCallback) -> None:
        def handle_motion(raw: Mapping[str, Any]) -> None:
            sample = self._parse(AccelerationSample, raw)
            if sample is not None:
                on_acceleration(sample)

        def handle_orientation(raw: Mapping[str, Any]) -> None:
            sample = self._parse(OrientationSample, raw)
            if sample is not None:
                on_orientation(sample)

        self._subscriptions.append(self.platform.subscribe_motion(handle_motion))
        if self.orientation:
            self._subscriptions.append(self.platform.subscribe_orientation(handle_orientation))
        elif self.heading_fallback is not None:
            self.heading_fallback.start(on_acceleration, on_orientation)

    def _parse(self, sample_type, raw: Mapping[str, Any]):
        try:
            return sample_type.from_raw(raw)
        except SensorReadError as e:
            self.dropped_samples += 1
            logger.debug("sample_dropped", sample_type=sample_type.__name__, error=str(e))
            return None

    def stop(self) -> None:
        while self._subscriptions:
            unsubscribe = self._subscriptions.pop()
            unsubscribe()
        if self.heading_fallback is not None:
            self.heading_fallback.stop()


class SimulatedSignalSource(SignalSource):
    """
    Synthetic samples for devices without usable sensors.

    Motion ticks produce a resting gravity-only reading, or with a small
    probability a footfall spike. Heading ticks sweep the compass by a
    fixed number of degrees. Without a motion ticker only headings are
    produced, which covers devices that have motion but no compass.
    """

    simulated = True

    def __init__(
        self,
        motion_ticker: Optional[TickSource],
        heading_ticker: TickSource,
        clock: Callable[[], int] = wall_clock_ms,
        step_probability: float = 0.0125,
        step_spike: float = 8.0,
        gravity: float = 9.8,
        heading_step: float = 10.0,
        seed: Optional[int] = None,
    ):
        """
        Args:
            motion_ticker: Drives synthetic accelerometer readings (None for heading only)
            heading_ticker: Drives synthetic compass headings
            clock: Returns the current time in ms
            step_probability: Chance that a motion tick is a footfall
            step_spike: Acceleration added on top of gravity for a footfall (m/s^2)
            gravity: Resting acceleration magnitude (m/s^2)
            heading_step: Degrees added on each heading tick
            seed: Seed for the random generator
        """
        self.motion_ticker = motion_ticker
        self.heading_ticker = heading_ticker
        self.clock = clock
        self.step_probability = step_probability
        self.step_spike = step_spike
        self.gravity = gravity
        self.heading_step = heading_step
        self.rng = np.random.default_rng(seed)
        self.heading = 0.0

    def start(self, on_acceleration: AccelerationCallback, on_orientation: OrientationCallback) -> None:
        def motion_tick() -> None:
            footfall = self.rng.random() < self.step_probability
            z = self.gravity + (self.step_spike if footfall else 0.0)
            on_acceleration(AccelerationSample(x=0.0, y=0.0, z=z, timestamp_ms=self.clock()))

        def heading_tick() -> None:
            self.heading = (self.heading + self.heading_step) % 360.0
            on_orientation(OrientationSample(heading_degrees=self.heading, timestamp_ms=self.clock()))

        if self.motion_ticker is not None:
            self.motion_ticker.start(motion_tick)
        self.heading_ticker.start(heading_tick)

    def stop(self) -> None:
        if self.motion_ticker is not None:
            self.motion_ticker.stop()
        self.heading_ticker.stop()
