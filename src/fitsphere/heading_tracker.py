"""Compass heading tracking from orientation samples."""

import math
from typing import Optional

from .models import DIRECTIONS, CompassState, OrientationSample


def heading_to_direction(heading_degrees: float) -> str:
    """
    Map a heading to its 8-point compass direction.

    Headings are wrapped into [0, 360) first, then split into 45 degree
    sectors centred on each direction. Sector boundaries round up, so 22.5
    is NE and 337.5 is N.

    Args:
        heading_degrees: Heading in degrees, clockwise from north

    Returns:
        One of N, NE, E, SE, S, SW, W, NW
    """
    wrapped = heading_degrees % 360.0
    index = int(math.floor(wrapped / 45.0 + 0.5)) % len(DIRECTIONS)
    return DIRECTIONS[index]


class HeadingTracker:
    """Keeps the last known compass heading. No smoothing is applied."""

    def __init__(self):
        self.state: Optional[CompassState] = None

    def ingest(self, sample: Optional[OrientationSample]) -> Optional[CompassState]:
        """
        Update the compass state from an orientation sample.

        Samples without a heading leave the previous state untouched.

        Returns:
            The new CompassState, or None if the sample was ignored
        """
        if sample is None or sample.heading_degrees is None:
            return None
        heading = sample.heading_degrees % 360.0
        self.state = CompassState(
            heading_degrees=heading,
            direction=heading_to_direction(heading),
        )
        return self.state

    def reset(self):
        self.state = None
