"""Tests for per-minute step buckets."""

from datetime import datetime, timezone

from fitsphere import MinuteAggregator, MinuteBucket


def ms(hour: int, minute: int, second: int = 0) -> int:
    return int(datetime(2026, 1, 1, hour, minute, second, tzinfo=timezone.utc).timestamp() * 1000)


def test_same_minute_produces_no_bucket():
    aggregator = MinuteAggregator(start_ms=ms(10, 15, 0), tz=timezone.utc)
    assert aggregator.on_tick(ms(10, 15, 20), 4) is None
    assert aggregator.on_tick(ms(10, 15, 59), 7) is None
    assert aggregator.buckets == []


def test_minute_boundary_closes_one_bucket():
    aggregator = MinuteAggregator(start_ms=ms(10, 15, 0), tz=timezone.utc)
    bucket = aggregator.on_tick(ms(10, 16, 1), 12)

    assert bucket == MinuteBucket(minute_label="15", step_count=12)
    assert aggregator.buckets == [bucket]
    assert aggregator.last_minute == 16
    assert aggregator.on_tick(ms(10, 16, 30), 0) is None


def test_zero_step_minute_still_produces_bucket():
    aggregator = MinuteAggregator(start_ms=ms(10, 15, 0), tz=timezone.utc)
    aggregator.on_tick(ms(10, 16, 0), 3)
    aggregator.on_tick(ms(10, 17, 0), 0)
    assert [b.step_count for b in aggregator.buckets] == [3, 0]


def test_labels_are_zero_padded_and_wrap_at_the_hour():
    aggregator = MinuteAggregator(start_ms=ms(10, 59, 0), tz=timezone.utc)
    aggregator.on_tick(ms(11, 0, 0), 5)
    aggregator.on_tick(ms(11, 1, 0), 6)
    assert [b.minute_label for b in aggregator.buckets] == ["59", "00"]


def test_first_tick_sets_minute_when_no_start_given():
    aggregator = MinuteAggregator(tz=timezone.utc)
    assert aggregator.on_tick(ms(10, 15, 0), 9) is None
    assert aggregator.last_minute == 15
    assert aggregator.on_tick(ms(10, 16, 0), 9) == MinuteBucket("15", 9)


def test_total_steps_sums_buckets():
    aggregator = MinuteAggregator(start_ms=ms(10, 0, 0), tz=timezone.utc)
    for minute, tally in [(1, 4), (2, 0), (3, 11)]:
        aggregator.on_tick(ms(10, minute, 0), tally)
    assert aggregator.total_steps == 15
