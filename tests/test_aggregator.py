"""Unit tests for the aggregation logic."""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone

import pytest

from models.records import DailyAggregate, Reading
from services.aggregator import DailyBucketAggregator, StatisticsAggregator


def _reading(timestamp: datetime, value: float) -> Reading:
    """Helper to build deterministic sensor readings."""

    return Reading(timestamp=timestamp, value=value)


T0 = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def test_aggregate_empty_iterable_returns_no_data() -> None:
    assert StatisticsAggregator().aggregate([]) is None


def test_aggregate_computes_statistics() -> None:
    readings = [
        _reading(T0, 20.0),
        _reading(T0 + timedelta(hours=1), 25.0),
        _reading(T0 + timedelta(hours=2), 30.0),
    ]

    stats = StatisticsAggregator().aggregate(readings)

    assert stats is not None
    assert stats.count == 3
    assert stats.min == 20.0
    assert stats.max == 30.0
    assert stats.mean == 25.0
    assert stats.std_dev == pytest.approx(4.0825, abs=1e-4)
    assert stats.first_reading_at == T0
    assert stats.last_reading_at == T0 + timedelta(hours=2)


def test_aggregate_uses_population_std_dev() -> None:
    readings = [_reading(T0, 2.0), _reading(T0, 4.0)]

    stats = StatisticsAggregator().aggregate(readings)

    assert stats is not None
    assert stats.std_dev == 1.0


def test_aggregate_single_reading() -> None:
    stats = StatisticsAggregator().aggregate([_reading(T0, -3.5)])

    assert stats is not None
    assert (stats.min, stats.max, stats.mean, stats.std_dev, stats.count) == (-3.5, -3.5, -3.5, 0.0, 1)


def test_aggregate_accepts_unsorted_input() -> None:
    readings = [
        _reading(T0 + timedelta(hours=5), 1.0),
        _reading(T0, 9.0),
        _reading(T0 + timedelta(hours=2), 4.0),
    ]

    stats = StatisticsAggregator().aggregate(iter(readings))

    assert stats is not None
    assert stats.first_reading_at == T0
    assert stats.last_reading_at == T0 + timedelta(hours=5)
    assert stats.min <= stats.mean <= stats.max
    assert math.isclose(stats.mean, 14.0 / 3)


def test_bucket_by_day_empty_series() -> None:
    assert DailyBucketAggregator().bucket_by_day([]) == []


def test_bucket_by_day_groups_and_orders_most_recent_first() -> None:
    readings = [
        _reading(datetime(2024, 1, 1, 6, tzinfo=timezone.utc), 10.0),
        _reading(datetime(2024, 1, 1, 18, tzinfo=timezone.utc), 20.0),
        _reading(datetime(2024, 1, 3, 9, tzinfo=timezone.utc), 5.0),
        _reading(datetime(2024, 1, 2, 12, tzinfo=timezone.utc), 7.0),
        _reading(datetime(2024, 1, 3, 10, tzinfo=timezone.utc), 15.0),
    ]

    buckets = DailyBucketAggregator(tz=timezone.utc).bucket_by_day(readings)

    assert buckets == [
        DailyAggregate(date=date(2024, 1, 3), min=5.0, max=15.0, mean=10.0, count=2),
        DailyAggregate(date=date(2024, 1, 2), min=7.0, max=7.0, mean=7.0, count=1),
        DailyAggregate(date=date(2024, 1, 1), min=10.0, max=20.0, mean=15.0, count=2),
    ]
    assert sum(bucket.count for bucket in buckets) == len(readings)
    assert len({bucket.date for bucket in buckets}) == len(buckets)


def test_bucket_by_day_skips_days_without_readings() -> None:
    readings = [
        _reading(datetime(2024, 1, 1, 12, tzinfo=timezone.utc), 1.0),
        _reading(datetime(2024, 1, 5, 12, tzinfo=timezone.utc), 2.0),
    ]

    buckets = DailyBucketAggregator(tz=timezone.utc).bucket_by_day(readings)

    assert [bucket.date for bucket in buckets] == [date(2024, 1, 5), date(2024, 1, 1)]


def test_bucket_by_day_uses_local_calendar_day() -> None:
    plus_seven = timezone(timedelta(hours=7))
    # 17:00 UTC on Jan 1 is exactly local midnight on Jan 2.
    midnight = datetime(2024, 1, 1, 17, 0, tzinfo=timezone.utc)
    before = midnight - timedelta(seconds=1)

    buckets = DailyBucketAggregator().bucket_by_day(
        [_reading(before, 1.0), _reading(midnight, 2.0)], tz=plus_seven
    )

    assert [(bucket.date, bucket.count) for bucket in buckets] == [
        (date(2024, 1, 2), 1),
        (date(2024, 1, 1), 1),
    ]
    assert buckets[0].mean == 2.0


def test_bucket_by_day_limit_keeps_most_recent_days() -> None:
    readings = [
        _reading(datetime(2024, 1, day, 12, tzinfo=timezone.utc), float(day)) for day in range(1, 8)
    ]

    buckets = DailyBucketAggregator(tz=timezone.utc).bucket_by_day(readings, limit=4)

    assert [bucket.date.day for bucket in buckets] == [7, 6, 5, 4]
