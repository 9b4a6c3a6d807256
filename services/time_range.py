"""Query window resolution for chart time ranges."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Mapping

from models.records import TimeRange


@dataclass(frozen=True, slots=True)
class RangeWindow:
    duration: timedelta
    sample_cap: int


@dataclass(frozen=True, slots=True)
class ResolvedWindow:
    start_time: datetime
    end_time: datetime
    sample_cap: int


# Day: one sample per 15 min, Week: per hour, Month: per 2 hours.
RANGE_WINDOWS: Mapping[TimeRange, RangeWindow] = MappingProxyType(
    {
        TimeRange.day: RangeWindow(duration=timedelta(hours=24), sample_cap=24 * 4),
        TimeRange.week: RangeWindow(duration=timedelta(days=7), sample_cap=7 * 24),
        TimeRange.month: RangeWindow(duration=timedelta(days=30), sample_cap=30 * 12),
    }
)


class TimeRangeResolver:
    """Maps a time range selector to a concrete fetch window."""

    def __init__(self, windows: Mapping[TimeRange, RangeWindow] = RANGE_WINDOWS) -> None:
        self._windows = windows

    def resolve(self, time_range: TimeRange, now: datetime) -> ResolvedWindow:
        window = self._windows[time_range]
        return ResolvedWindow(
            start_time=now - window.duration,
            end_time=now,
            sample_cap=window.sample_cap,
        )
