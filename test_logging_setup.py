"""Tests for the structlog configuration."""

import json
import logging

import pytest
import structlog

from fitsphere import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_json_logs_render_one_object_per_event(caplog):
    configure_logging("DEBUG", json_logs=True)
    assert isinstance(structlog.get_config()['processors'][-1], structlog.processors.JSONRenderer)

    caplog.set_level(logging.WARNING)
    structlog.get_logger("fitsphere.position_tracker").warning("position_error", status="unavailable", code=3)

    event = json.loads(caplog.records[-1].getMessage())
    assert event['event'] == "position_error"
    assert event['level'] == "warning"
    assert event['logger'] == "fitsphere.position_tracker"
    assert event['code'] == 3
    assert 'timestamp' in event


def test_console_logs_by_default(caplog):
    configure_logging("INFO")
    assert isinstance(structlog.get_config()['processors'][-1], structlog.dev.ConsoleRenderer)

    caplog.set_level(logging.INFO)
    structlog.get_logger("fitsphere.session").info("session_state_changed", current="active_real")

    message = caplog.records[-1].getMessage()
    assert "session_state_changed" in message
    assert "current=active_real" in message
