"""Formatting helpers that turn derived values into dashboard text."""

from typing import Any, Dict, Optional, Tuple

from .models import CompassState, DashboardUpdate, PositionFix, PositionStatus


POSITION_MESSAGES = {
    PositionStatus.DENIED: "Location denied.",
    PositionStatus.UNAVAILABLE: "Location unavailable.",
    PositionStatus.UNSUPPORTED: "Geolocation not supported.",
}


def format_heading(compass: Optional[CompassState]) -> str:
    """
    Format a heading as whole degrees with its direction, e.g. "123° SE".
    
    Returns:
        Formatted heading, or "--" before the first heading
    """
    if compass is None:
        return "--"
    # Round half up, then wrap so 359.6 reads as 0
    degrees = int(compass.heading_degrees + 0.5) % 360
    return f"{degrees}° {compass.direction}"


def format_position(fix: Optional[PositionFix]) -> Tuple[str, str]:
    """
    Format a position fix for display.
    
    Returns:
        Tuple of (coordinates_text, label_text)
    """
    if fix is None:
        return "Locating...", "-"
    if fix.resolved:
        return f"{fix.latitude:.5f}°, {fix.longitude:.5f}°", "Your Location"
    return POSITION_MESSAGES.get(fix.status, "Location unavailable."), "-"


def format_update(update: DashboardUpdate) -> Dict[str, Any]:
    """
    Flatten an update into the text shown by the dashboard widgets.
    
    Args:
        update: Snapshot pushed by the sensor session
        
    Returns:
        Dictionary of display strings and values keyed by widget
    """
    coords, label = format_position(update.position)
    return {
        'steps': update.step_count,
        'minute_steps': update.minute_steps,
        'heading': format_heading(update.compass),
        'coords': coords,
        'location_label': label,
        'control_label': update.control.label,
        'control_enabled': update.control.enabled,
        'mode': "Simulated" if update.simulated else "Live",
        'notice': update.notice,
    }
