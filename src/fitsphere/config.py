"""Configuration settings for the FitSphere sensor dashboard."""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SensorConfig:
    """Configuration for signal processing, simulation and playback."""
    
    # Step detection parameters
    GRAVITY: float = 9.8  # m/s^2 - baseline subtracted from the magnitude
    WINDOW_SIZE: int = 5  # Samples in the smoothing window
    STEP_THRESHOLD: float = 1.2  # m/s^2 - gravity-removed average needed for a step
    STEP_DEBOUNCE_MS: int = 300  # Minimum time between steps (ms)
    
    # Simulated sources (used when sensors are missing or denied)
    SIM_MOTION_INTERVAL_MS: int = 50  # 20 Hz synthetic accelerometer
    SIM_STEP_PROBABILITY: float = 0.0125  # Chance of a footfall per motion tick
    SIM_STEP_SPIKE: float = 8.0  # m/s^2 - footfall spike above gravity
    SIM_HEADING_INTERVAL_MS: int = 500
    SIM_HEADING_STEP: float = 10.0  # Degrees per heading tick
    SIM_SEED: Optional[int] = None  # Fixed seed for reproducible simulation
    
    # Position tracking
    POSITION_TIMEOUT_MS: int = 5000  # Report unavailable after this long without a fix
    POSITION_HIGH_ACCURACY: bool = True
    POSITION_MAXIMUM_AGE_MS: int = 0  # Never accept cached fixes
    
    # Session
    HEARTBEAT_INTERVAL_MS: int = 1000  # Minute rollover check cadence
    
    # Recorded sessions
    DATA_DIR: Path = Path("data/recordings")
    PLAYBACK_SPEED: float = 1.0  # Playback speed multiplier (1 = real-time)
    
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False


@dataclass
class UIConfig:
    """Configuration for UI elements and styling."""
    
    PAGE_TITLE: str = "FitSphere dashboard"
    CHART_HEIGHT: int = 320
    COMPASS_HEIGHT: int = 260
    CHART_MARGIN: dict = field(default_factory=lambda: dict(l=40, r=20, t=40, b=40))
    CHART_COLORS: dict = field(default_factory=lambda: {
        'steps': '#2a9d8f',    # Teal
        'needle': '#d68032'    # Orange
    })
    REFRESH_INTERVAL_MS: int = 250  # How often the UI polls the latest update
    TOOLTIPS: dict = field(default_factory=lambda: {
        'steps': "Steps detected since the session started.",
        'minute_steps': "Steps counted in the current wall-clock minute.",
        'heading': "Compass heading reported by the device orientation sensor.",
    })
