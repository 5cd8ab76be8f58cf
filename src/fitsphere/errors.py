"""Exception types raised by the sensor pipeline."""

from typing import Optional


class SensorError(Exception):
    """Base class for all sensor pipeline errors."""


class PermissionDenied(SensorError):
    """The user or platform refused access to motion sensors."""


class CapabilityUnavailable(SensorError):
    """The platform does not expose the requested sensor."""


class SensorReadError(SensorError):
    """A raw sample was malformed or missing required fields."""


class PositionUnavailable(SensorError):
    """
    No position fix could be produced.

    Platforms pass an instance of this to a position watch's error callback
    rather than raising it, mirroring how browsers report geolocation errors.
    """

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3

    def __init__(self, message: str = "Position unavailable", code: int = POSITION_UNAVAILABLE,
                 reason: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.reason = reason or message

    @property
    def denied(self) -> bool:
        return self.code == self.PERMISSION_DENIED
