"""Sensor signal pipeline for the FitSphere live fitness dashboard."""

from .config import SensorConfig, UIConfig
from .errors import (
    SensorError,
    PermissionDenied,
    CapabilityUnavailable,
    SensorReadError,
    PositionUnavailable,
)
from .models import (
    AccelerationSample,
    OrientationSample,
    StepEvent,
    CompassState,
    PositionFix,
    PositionStatus,
    MinuteBucket,
    ControlState,
    DashboardUpdate,
)
from .step_detector import StepDetector
from .heading_tracker import HeadingTracker, heading_to_direction
from .position_tracker import PositionTracker
from .minute_aggregator import MinuteAggregator
from .tick_sources import TickSource, IntervalTicker, ManualTicker, wall_clock_ms
from .platform import Platform, HeadlessPlatform, Capabilities, PermissionResult, PositionWatchOptions
from .signal_source import SignalSource, DeviceSignalSource, SimulatedSignalSource
from .session import SensorSession, SessionState
from .data_loader import RecordingLoader, RecordedPlatform
from .logging_setup import configure_logging


__all__ = [
    'SensorConfig',
    'UIConfig',
    'SensorError',
    'PermissionDenied',
    'CapabilityUnavailable',
    'SensorReadError',
    'PositionUnavailable',
    'AccelerationSample',
    'OrientationSample',
    'StepEvent',
    'CompassState',
    'PositionFix',
    'PositionStatus',
    'MinuteBucket',
    'ControlState',
    'DashboardUpdate',
    'StepDetector',
    'HeadingTracker',
    'heading_to_direction',
    'PositionTracker',
    'MinuteAggregator',
    'TickSource',
    'IntervalTicker',
    'ManualTicker',
    'wall_clock_ms',
    'Platform',
    'HeadlessPlatform',
    'Capabilities',
    'PermissionResult',
    'PositionWatchOptions',
    'SignalSource',
    'DeviceSignalSource',
    'SimulatedSignalSource',
    'SensorSession',
    'SessionState',
    'RecordingLoader',
    'RecordedPlatform',
    'configure_logging',
]
