"""Aggregation logic for sensor readings."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Dict, Iterable, List, Optional

from models.records import DailyAggregate, Reading, Statistics


class StatisticsAggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def aggregate(self, readings: Iterable[Reading]) -> Optional[Statistics]:
        """Return window statistics, or ``None`` when there are no readings."""
        items = list(readings)
        if not items:
            return None

        count = 0
        total = 0.0
        min_value = max_value = items[0].value
        first = last = items[0].timestamp

        for reading in items:
            count += 1
            value = reading.value
            total += value

            if value < min_value:
                min_value = value
            if value > max_value:
                max_value = value
            if reading.timestamp < first:
                first = reading.timestamp
            if reading.timestamp > last:
                last = reading.timestamp

        mean = total / count
        # Population standard deviation.
        variance = sum((reading.value - mean) ** 2 for reading in items) / count

        return Statistics(
            min=min_value,
            max=max_value,
            mean=mean,
            std_dev=math.sqrt(variance),
            count=count,
            first_reading_at=first,
            last_reading_at=last,
        )


@dataclass
class _DayBucket:
    min_value: float
    max_value: float
    total: float = 0.0
    count: int = 0


class DailyBucketAggregator:
    """Groups readings by local calendar day."""

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self._tz = tz

    def bucket_by_day(
        self,
        readings: Iterable[Reading],
        tz: Optional[tzinfo] = None,
        limit: Optional[int] = None,
    ) -> List[DailyAggregate]:
        """Aggregate per local day, most recent day first.

        Days without readings are skipped. ``limit`` keeps only the N most
        recent days.
        """
        zone = tz if tz is not None else self._tz
        buckets: Dict[date, _DayBucket] = {}

        for reading in readings:
            local = reading.timestamp.astimezone(zone) if zone is not None else reading.timestamp
            day = local.date()
            value = reading.value
            bucket = buckets.get(day)
            if bucket is None:
                bucket = buckets[day] = _DayBucket(min_value=value, max_value=value)
            bucket.count += 1
            bucket.total += value
            if value < bucket.min_value:
                bucket.min_value = value
            if value > bucket.max_value:
                bucket.max_value = value

        aggregates = [
            DailyAggregate(
                date=day,
                min=bucket.min_value,
                max=bucket.max_value,
                mean=bucket.total / bucket.count,
                count=bucket.count,
            )
            for day, bucket in sorted(buckets.items(), key=lambda item: item[0], reverse=True)
        ]
        if limit is not None:
            return aggregates[:limit]
        return aggregates
