"""Tests for compass heading tracking and direction bucketing."""

import pytest

from fitsphere import CompassState, HeadingTracker, OrientationSample, heading_to_direction


@pytest.mark.parametrize("heading, direction", [
    (0.0, 'N'),
    (22.0, 'N'),
    (22.5, 'NE'),
    (44.0, 'NE'),
    (45.0, 'NE'),
    (90.0, 'E'),
    (135.0, 'SE'),
    (180.0, 'S'),
    (225.0, 'SW'),
    (270.0, 'W'),
    (315.0, 'NW'),
    (337.4, 'NW'),
    (337.5, 'N'),
    (359.0, 'N'),
    (360.0, 'N'),
])
def test_direction_table(heading, direction):
    assert heading_to_direction(heading) == direction


def test_heading_is_stored_verbatim():
    tracker = HeadingTracker()
    state = tracker.ingest(OrientationSample(heading_degrees=123.4, timestamp_ms=0))
    assert state == CompassState(heading_degrees=123.4, direction='SE')
    assert tracker.state is state


def test_full_turn_wraps_to_north():
    tracker = HeadingTracker()
    state = tracker.ingest(OrientationSample(heading_degrees=360.0, timestamp_ms=0))
    assert state.heading_degrees == 0.0
    assert state.direction == 'N'


def test_missing_heading_keeps_previous_state():
    tracker = HeadingTracker()
    tracker.ingest(OrientationSample(heading_degrees=90.0, timestamp_ms=0))
    before = tracker.state

    assert tracker.ingest(OrientationSample(heading_degrees=None, timestamp_ms=10)) is None
    assert tracker.ingest(None) is None
    assert tracker.state is before


def test_missing_heading_before_any_fix():
    tracker = HeadingTracker()
    assert tracker.ingest(OrientationSample(heading_degrees=None, timestamp_ms=0)) is None
    assert tracker.state is None


def test_each_sample_replaces_state():
    tracker = HeadingTracker()
    for heading in (10.0, 200.0, 300.0):
        tracker.ingest(OrientationSample(heading_degrees=heading, timestamp_ms=0))
    assert tracker.state == CompassState(heading_degrees=300.0, direction='NW')
