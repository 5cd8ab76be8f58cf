"""Tests for the UI sink that feeds the streamlit render loop."""

from fitsphere import DashboardUpdate
from fitsphere.ui_components import LatestUpdateSink


def make_update(steps):
    return DashboardUpdate(step_count=steps, minute_steps=steps, compass=None, position=None)


def test_sink_keeps_only_latest_update():
    sink = LatestUpdateSink()
    assert sink.take() is None

    sink(make_update(1))
    sink(make_update(2))
    assert sink.received == 2
    assert sink.take().step_count == 2
    # Already taken
    assert sink.take() is None

    sink(make_update(3))
    assert sink.take().step_count == 3
