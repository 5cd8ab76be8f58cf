"""Data types passed between the sensor sources, detectors and the UI sink."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional

from .errors import SensorReadError


DIRECTIONS = ('N', 'NE', 'E', 'SE', 'S', 'SW', 'W', 'NW')


def _read_float(raw: Mapping[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise SensorReadError(f"Field {key!r} is not numeric: {value!r}") from e
    if math.isnan(value) or math.isinf(value):
        raise SensorReadError(f"Field {key!r} is not finite: {value!r}")
    return value


def _read_timestamp(raw: Mapping[str, Any]) -> int:
    timestamp = _read_float(raw, 'timestamp_ms')
    if timestamp is None:
        raise SensorReadError("Sample has no timestamp_ms")
    return int(timestamp)


@dataclass(frozen=True)
class AccelerationSample:
    """One accelerometer reading including gravity (m/s^2)."""
    x: Optional[float]
    y: Optional[float]
    z: Optional[float]
    timestamp_ms: int

    @property
    def has_data(self) -> bool:
        return self.x is not None and self.y is not None and self.z is not None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> 'AccelerationSample':
        """
        Build a sample from a platform payload.

        Missing axes are kept as None so the detector can treat the sample as
        empty; present but unreadable values raise SensorReadError.
        """
        if not isinstance(raw, Mapping):
            raise SensorReadError(f"Acceleration payload is not a mapping: {raw!r}")
        return cls(
            x=_read_float(raw, 'x'),
            y=_read_float(raw, 'y'),
            z=_read_float(raw, 'z'),
            timestamp_ms=_read_timestamp(raw),
        )


@dataclass(frozen=True)
class OrientationSample:
    """One orientation reading; heading_degrees is None when the device has no fix."""
    heading_degrees: Optional[float]
    timestamp_ms: int

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> 'OrientationSample':
        if not isinstance(raw, Mapping):
            raise SensorReadError(f"Orientation payload is not a mapping: {raw!r}")
        return cls(
            heading_degrees=_read_float(raw, 'heading_degrees'),
            timestamp_ms=_read_timestamp(raw),
        )


@dataclass(frozen=True)
class StepEvent:
    """A confirmed step."""
    timestamp_ms: int


@dataclass(frozen=True)
class CompassState:
    """Latest resolved heading and its 8-point compass direction."""
    heading_degrees: float
    direction: str


class PositionStatus(str, Enum):
    RESOLVED = 'resolved'
    DENIED = 'denied'
    UNAVAILABLE = 'unavailable'
    UNSUPPORTED = 'unsupported'


@dataclass(frozen=True)
class PositionFix:
    """A resolved coordinate pair, or an explicit failure state."""
    status: PositionStatus
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    reason: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.status is PositionStatus.RESOLVED

    @classmethod
    def at(cls, latitude: float, longitude: float) -> 'PositionFix':
        return cls(PositionStatus.RESOLVED, latitude=latitude, longitude=longitude)

    @classmethod
    def failed(cls, status: PositionStatus, reason: Optional[str] = None) -> 'PositionFix':
        return cls(status, reason=reason)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> 'PositionFix':
        """
        Normalize a raw location fix.

        Accepts either flat ``{'latitude', 'longitude'}`` payloads or the
        browser-style ``{'coords': {...}}`` nesting.
        """
        if not isinstance(raw, Mapping):
            raise SensorReadError(f"Location payload is not a mapping: {raw!r}")
        coords = raw.get('coords', raw)
        if not isinstance(coords, Mapping):
            raise SensorReadError(f"Location coords are not a mapping: {coords!r}")
        latitude = _read_float(coords, 'latitude')
        longitude = _read_float(coords, 'longitude')
        if latitude is None or longitude is None:
            raise SensorReadError("Location fix is missing latitude or longitude")
        if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
            raise SensorReadError(f"Location fix out of range: {latitude}, {longitude}")
        return cls.at(latitude, longitude)


@dataclass(frozen=True)
class MinuteBucket:
    """Steps counted during one completed wall-clock minute."""
    minute_label: str
    step_count: int


@dataclass(frozen=True)
class ControlState:
    """State of the dashboard's start button."""
    enabled: bool = True
    label: str = "Enable Step Counter"


@dataclass(frozen=True)
class DashboardUpdate:
    """Snapshot pushed to the UI sink whenever a derived value changes."""
    step_count: int
    minute_steps: int
    compass: Optional[CompassState]
    position: Optional[PositionFix]
    buckets: List[MinuteBucket] = field(default_factory=list)
    control: ControlState = field(default_factory=ControlState)
    notice: Optional[str] = None
    simulated: bool = False
