"""
Platform adapter contract.

A platform supplies capability probing, the motion permission request and
push feeds of raw sensor payloads. Payloads are plain mappings:

- motion: ``{'x', 'y', 'z', 'timestamp_ms'}``
- orientation: ``{'heading_degrees', 'timestamp_ms'}``
- location: ``{'latitude', 'longitude'}`` or ``{'coords': {...}}``
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from .errors import CapabilityUnavailable, PositionUnavailable

RawListener = Callable[[Mapping[str, Any]], None]
ErrorListener = Callable[[PositionUnavailable], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class Capabilities:
    """Result of probing the platform once at session start."""
    motion_available: bool = False
    orientation_available: bool = False
    permission_required: bool = False
    geolocation_available: bool = False


class PermissionResult(str, Enum):
    GRANTED = 'granted'
    DENIED = 'denied'


@dataclass(frozen=True)
class PositionWatchOptions:
    """Options forwarded to the platform's continuous position watch."""
    high_accuracy: bool = True
    timeout_ms: int = 5000
    maximum_age_ms: int = 0


class Platform(ABC):
    """Source of capabilities, permissions and raw sensor payloads."""

    @abstractmethod
    def probe(self) -> Capabilities:
        ...

    async def request_permission(self) -> PermissionResult:
        """Ask for motion access. Only called when ``permission_required`` is set."""
        return PermissionResult.GRANTED

    @abstractmethod
    def subscribe_motion(self, listener: RawListener) -> Unsubscribe:
        ...

    @abstractmethod
    def subscribe_orientation(self, listener: RawListener) -> Unsubscribe:
        ...

    @abstractmethod
    def watch_position(
        self,
        on_fix: RawListener,
        on_error: ErrorListener,
        options: PositionWatchOptions,
    ) -> Unsubscribe:
        ...


class HeadlessPlatform(Platform):
    """A platform without any sensors, e.g. a desktop with no recording."""

    def probe(self) -> Capabilities:
        return Capabilities()

    def subscribe_motion(self, listener: RawListener) -> Unsubscribe:
        raise CapabilityUnavailable("No motion sensor")

    def subscribe_orientation(self, listener: RawListener) -> Unsubscribe:
        raise CapabilityUnavailable("No orientation sensor")

    def watch_position(self, on_fix, on_error, options) -> Unsubscribe:
        raise CapabilityUnavailable("Geolocation not supported")
