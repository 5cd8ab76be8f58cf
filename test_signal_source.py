"""Tests for the device and simulated signal sources and tick sources."""

import asyncio

import pytest

from fitsphere import (
    AccelerationSample,
    DeviceSignalSource,
    IntervalTicker,
    ManualTicker,
    OrientationSample,
    SimulatedSignalSource,
    StepDetector,
)


def collect(source):
    accel, orient = [], []
    source.start(accel.append, orient.append)
    return accel, orient


def test_device_source_parses_payloads(make_platform):
    platform = make_platform()
    source = DeviceSignalSource(platform)
    accel, orient = collect(source)

    platform.push_motion(0.1, 0.2, 9.9, 1000)
    platform.push_heading(45.0, 1000)
    platform.push_heading(None, 1010)

    assert accel == [AccelerationSample(x=0.1, y=0.2, z=9.9, timestamp_ms=1000)]
    assert orient == [
        OrientationSample(heading_degrees=45.0, timestamp_ms=1000),
        OrientationSample(heading_degrees=None, timestamp_ms=1010),
    ]


def test_device_source_drops_malformed_samples(make_platform):
    platform = make_platform()
    source = DeviceSignalSource(platform)
    accel, _ = collect(source)

    platform.push_raw_motion({'x': 'fast', 'y': 0, 'z': 0, 'timestamp_ms': 0})
    platform.push_raw_motion({'x': 0, 'y': 0, 'z': 9.8})
    platform.push_raw_motion(None)
    platform.push_raw_motion({'x': float('nan'), 'y': 0, 'z': 0, 'timestamp_ms': 5})
    platform.push_motion(0.0, 0.0, 9.8, 20)

    assert source.dropped_samples == 4
    assert accel == [AccelerationSample(x=0.0, y=0.0, z=9.8, timestamp_ms=20)]


def test_device_source_keeps_samples_with_missing_axes(make_platform):
    platform = make_platform()
    source = DeviceSignalSource(platform)
    accel, _ = collect(source)

    platform.push_raw_motion({'x': None, 'y': None, 'z': None, 'timestamp_ms': 30})
    assert accel[0].has_data is False
    assert source.dropped_samples == 0


def test_device_source_stop_unsubscribes(make_platform):
    platform = make_platform()
    source = DeviceSignalSource(platform)
    collect(source)
    assert len(platform.motion_listeners) == 1
    assert len(platform.orientation_listeners) == 1

    source.stop()
    assert platform.motion_listeners == []
    assert platform.orientation_listeners == []


def test_device_source_without_orientation(make_platform):
    platform = make_platform()
    source = DeviceSignalSource(platform, orientation=False)
    collect(source)
    assert platform.orientation_listeners == []


def test_device_source_uses_heading_fallback_without_orientation(make_platform):
    platform = make_platform()
    fallback = SimulatedSignalSource(motion_ticker=None, heading_ticker=ManualTicker(), clock=lambda: 0)
    source = DeviceSignalSource(platform, orientation=False, heading_fallback=fallback)
    accel, orient = collect(source)

    fallback.heading_ticker.tick(2)
    platform.push_motion(0.0, 0.0, 9.8, 0)
    assert [s.heading_degrees for s in orient] == [10.0, 20.0]
    assert len(accel) == 1

    source.stop()
    assert platform.motion_listeners == []
    assert not fallback.heading_ticker.running


def simulated(step_probability=0.0125, seed=3):
    clock_ms = iter(range(0, 10_000_000, 50))
    return SimulatedSignalSource(
        motion_ticker=ManualTicker(),
        heading_ticker=ManualTicker(),
        clock=lambda: next(clock_ms),
        step_probability=step_probability,
        seed=seed,
    )


def test_simulated_heading_sweeps_and_wraps():
    source = simulated()
    _, orient = collect(source)

    source.heading_ticker.tick(36)
    headings = [s.heading_degrees for s in orient]
    assert headings[:3] == [10.0, 20.0, 30.0]
    assert headings[-1] == 0.0
    assert all(0.0 <= h < 360.0 for h in headings)


def test_simulated_rest_is_gravity_only():
    source = simulated(step_probability=0.0)
    accel, _ = collect(source)
    source.motion_ticker.tick(10)

    assert len(accel) == 10
    assert all(s.z == pytest.approx(9.8) for s in accel)
    detector = StepDetector()
    assert [detector.ingest(s) for s in accel] == [None] * 10


def test_simulated_footfall_is_detected_as_one_step():
    source = simulated(step_probability=0.0)
    accel, _ = collect(source)
    source.motion_ticker.tick(4)
    source.step_probability = 1.0
    source.motion_ticker.tick(1)
    source.step_probability = 0.0
    source.motion_ticker.tick(10)

    detector = StepDetector()
    events = [e for e in (detector.ingest(s) for s in accel) if e is not None]
    assert len(events) == 1


def test_simulated_source_is_reproducible_with_seed():
    def run(seed):
        source = simulated(step_probability=0.2, seed=seed)
        accel, _ = collect(source)
        source.motion_ticker.tick(200)
        return [s.z for s in accel]

    assert run(42) == run(42)


def test_simulated_stop_stops_tickers():
    source = simulated()
    collect(source)
    source.stop()
    assert not source.motion_ticker.running
    assert not source.heading_ticker.running


def test_manual_ticker_only_ticks_when_started():
    ticker = ManualTicker()
    calls = []
    ticker.tick()
    ticker.start(lambda: calls.append(1))
    ticker.tick(3)
    ticker.stop()
    ticker.tick()
    assert calls == [1, 1, 1]


def test_interval_ticker_runs_on_event_loop():
    async def scenario():
        ticker = IntervalTicker(10)
        calls = []
        ticker.start(lambda: calls.append(1))
        await asyncio.sleep(0.08)
        ticker.stop()
        count = len(calls)
        await asyncio.sleep(0.05)
        return count, len(calls), ticker.running

    count, later, running = asyncio.run(scenario())
    assert count >= 2
    assert later == count
    assert running is False


def test_interval_ticker_survives_callback_errors():
    async def scenario():
        ticker = IntervalTicker(5)
        calls = []

        def flaky():
            calls.append(1)
            raise RuntimeError("boom")

        ticker.start(flaky)
        await asyncio.sleep(0.05)
        ticker.stop()
        return len(calls)

    assert asyncio.run(scenario()) >= 2


def test_heading_only_simulation_emits_no_motion():
    source = SimulatedSignalSource(motion_ticker=None, heading_ticker=ManualTicker(), clock=lambda: 0)
    accel, orient = collect(source)

    source.heading_ticker.tick(3)
    assert accel == []
    assert [s.heading_degrees for s in orient] == [10.0, 20.0, 30.0]
    source.stop()
    assert not source.heading_ticker.running
