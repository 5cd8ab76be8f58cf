"""Real-time step detection module."""

from typing import Optional

import structlog

from .models import AccelerationSample, StepEvent
from .signal_filters import MovingAverageFilter, gravity_removed_magnitude

logger = structlog.get_logger(__name__)


class StepDetector:
    """
    Detects steps in real-time from accelerometer samples.

    Each sample's magnitude has gravity removed and is smoothed with a short
    moving average. A step is confirmed while the average sits above the
    threshold, provided the debounce interval has passed since the previous
    step. This is a debounced threshold detector rather than a peak detector:
    sustained elevation keeps firing once per debounce interval, and no
    rise-then-fall shape is required.
    """

    def __init__(
        self,
        window_size: int = 5,
        threshold: float = 1.2,
        debounce_ms: int = 300,
        gravity: float = 9.8,
    ):
        """
        Initialize the step detector.

        Args:
            window_size: Moving average window size (samples)
            threshold: Gravity-removed average (m/s^2) that must be exceeded
            debounce_ms: Minimum time between confirmed steps (ms)
            gravity: Gravity baseline subtracted from each magnitude (m/s^2)
        """
        self.window_size = window_size
        self.threshold = threshold
        self.debounce_ms = debounce_ms
        self.gravity = gravity

        self.window = MovingAverageFilter(window_size)
        self.step_count = 0
        self.last_step_time: Optional[int] = None
        self.last_average: Optional[float] = None

    def reset(self):
        """Reset all internal state."""
        self.window.reset()
        self.step_count = 0
        self.last_step_time = None
        self.last_average = None

    def ingest(self, sample: Optional[AccelerationSample]) -> Optional[StepEvent]:
        """
        Process a new sample and return a step event if one is confirmed.

        Args:
            sample: Acceleration sample; None or a sample without axis data is ignored

        Returns:
            StepEvent for a confirmed step, otherwise None
        """
        if sample is None or not sample.has_data:
            return None

        g = gravity_removed_magnitude(sample.x, sample.y, sample.z, self.gravity)
        avg = self.window.filter_sample(g)
        self.last_average = avg

        if avg <= self.threshold or not self._debounce_elapsed(sample.timestamp_ms):
            return None

        self.step_count += 1
        self.last_step_time = sample.timestamp_ms
        logger.debug(
            "step_detected",
            timestamp_ms=sample.timestamp_ms,
            average=round(avg, 3),
            step_count=self.step_count,
        )
        return StepEvent(timestamp_ms=sample.timestamp_ms)

    def _debounce_elapsed(self, timestamp_ms: int) -> bool:
        """Check that strictly more than the debounce interval has passed."""
        if self.last_step_time is None:
            return True
        return timestamp_ms - self.last_step_time > self.debounce_ms
