"""Per-minute step history for the steps chart."""

from datetime import datetime, tzinfo
from typing import List, Optional

import structlog

from .models import MinuteBucket

logger = structlog.get_logger(__name__)


def minute_of(now_ms: int, tz: Optional[tzinfo] = None) -> int:
    """Wall-clock minute (0-59) for a millisecond timestamp, local time by default."""
    return datetime.fromtimestamp(now_ms / 1000.0, tz=tz).minute


class MinuteAggregator:
    """
    Buckets step counts by wall-clock minute.

    Must be ticked by a heartbeat rather than by step arrival so that a
    minute without steps still closes with a zero-count bucket.
    """

    def __init__(self, start_ms: Optional[int] = None, tz: Optional[tzinfo] = None):
        """
        Args:
            start_ms: Session start time; when None the first tick sets the minute
            tz: Time zone used to read the minute (local time if None)
        """
        self.tz = tz
        self.last_minute: Optional[int] = None if start_ms is None else minute_of(start_ms, tz)
        self.buckets: List[MinuteBucket] = []

    def on_tick(self, now_ms: int, current_step_tally: int) -> Optional[MinuteBucket]:
        """
        Close the previous minute if the wall-clock minute has changed.

        Args:
            now_ms: Current time (ms since epoch)
            current_step_tally: Steps counted since the last rollover

        Returns:
            The appended bucket, in which case the caller must reset its
            tally to zero; otherwise None
        """
        minute = minute_of(now_ms, self.tz)
        if self.last_minute is None:
            self.last_minute = minute
            return None
        if minute == self.last_minute:
            return None

        bucket = MinuteBucket(minute_label=f"{self.last_minute:02d}", step_count=current_step_tally)
        self.buckets.append(bucket)
        self.last_minute = minute
        logger.debug("minute_closed", minute=bucket.minute_label, steps=bucket.step_count)
        return bucket

    @property
    def total_steps(self) -> int:
        """Steps across all closed buckets."""
        return sum(bucket.step_count for bucket in self.buckets)
