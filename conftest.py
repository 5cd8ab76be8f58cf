"""Shared fixtures: a scriptable platform, manual tickers and a manual clock."""

import asyncio
from datetime import datetime, timezone

import pytest

from fitsphere import (
    Capabilities,
    CapabilityUnavailable,
    ManualTicker,
    PermissionResult,
    Platform,
)

SESSION_START = datetime(2026, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


class FakePlatform(Platform):
    """
    Platform whose feeds are pushed by the test.

    ``permission`` may be a PermissionResult, an exception to raise, or an
    asyncio Future the test resolves later.
    """

    def __init__(self, capabilities=None, permission=PermissionResult.GRANTED):
        self.capabilities = capabilities or Capabilities(
            motion_available=True,
            orientation_available=True,
            permission_required=False,
            geolocation_available=True,
        )
        self.permission = permission
        self.permission_calls = 0
        self.motion_listeners = []
        self.orientation_listeners = []
        self.position_watchers = []

    def probe(self):
        return self.capabilities

    async def request_permission(self):
        self.permission_calls += 1
        if isinstance(self.permission, Exception):
            raise self.permission
        if isinstance(self.permission, asyncio.Future):
            return await self.permission
        return self.permission

    def subscribe_motion(self, listener):
        self.motion_listeners.append(listener)
        return lambda: self.motion_listeners.remove(listener)

    def subscribe_orientation(self, listener):
        self.orientation_listeners.append(listener)
        return lambda: self.orientation_listeners.remove(listener)

    def watch_position(self, on_fix, on_error, options):
        if not self.capabilities.geolocation_available:
            raise CapabilityUnavailable("Geolocation not supported")
        watcher = (on_fix, on_error, options)
        self.position_watchers.append(watcher)
        return lambda: self.position_watchers.remove(watcher)

    def push_motion(self, x, y, z, timestamp_ms):
        for listener in list(self.motion_listeners):
            listener({'x': x, 'y': y, 'z': z, 'timestamp_ms': timestamp_ms})

    def push_raw_motion(self, payload):
        for listener in list(self.motion_listeners):
            listener(payload)

    def push_heading(self, heading, timestamp_ms):
        for listener in list(self.orientation_listeners):
            listener({'heading_degrees': heading, 'timestamp_ms': timestamp_ms})

    def push_fix(self, latitude, longitude):
        for on_fix, _, _ in list(self.position_watchers):
            on_fix({'coords': {'latitude': latitude, 'longitude': longitude}})

    def push_position_error(self, error):
        for _, on_error, _ in list(self.position_watchers):
            on_error(error)


class ManualClock:
    """Clock in ms that only moves when told to."""

    def __init__(self, start: datetime = SESSION_START):
        self.now = int(start.timestamp() * 1000)

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class TickerRegistry:
    """Ticker factory that hands out ManualTickers and remembers them by interval."""

    def __init__(self):
        self.tickers = {}

    def __call__(self, interval_ms: int) -> ManualTicker:
        ticker = ManualTicker()
        self.tickers.setdefault(interval_ms, []).append(ticker)
        return ticker

    def get(self, interval_ms: int) -> ManualTicker:
        return self.tickers[interval_ms][-1]

    def all(self):
        return [t for tickers in self.tickers.values() for t in tickers]


@pytest.fixture
def make_platform():
    return FakePlatform


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def tickers():
    return TickerRegistry()
