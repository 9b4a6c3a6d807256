"""Axis label selection for chart rendering."""

from __future__ import annotations

import math
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from models.records import Reading, TimeRange


def format_label(timestamp: datetime, time_range: TimeRange, tz: Optional[tzinfo] = None) -> str:
    local = timestamp.astimezone(tz) if tz is not None else timestamp
    if time_range is TimeRange.day:
        return f"{local.hour:02d}:{local.minute:02d}"
    return f"{local.month}/{local.day}"


class LabelDownsampler:
    """Picks an evenly strided subset of timestamp labels.

    Only labels are thinned out; the readings themselves are left untouched.
    """

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self._tz = tz

    def downsample(
        self,
        series: Sequence[Reading],
        max_labels: int,
        time_range: TimeRange,
    ) -> List[str]:
        total = len(series)
        if total == 0 or max_labels <= 0:
            return []

        step = max(1, math.ceil(total / min(max_labels, total)))
        return [
            format_label(reading.timestamp, time_range, self._tz)
            for index, reading in enumerate(series)
            if index % step == 0
        ]
