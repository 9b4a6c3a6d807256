"""Threshold classification of readings against per-sensor optimal ranges."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from models.records import ClassificationStatus, OptimalRange, SensorType

CRITICAL_LOW_FACTOR = 0.7
CRITICAL_HIGH_FACTOR = 1.3

DEFAULT_OPTIMAL_RANGES: Mapping[SensorType, OptimalRange] = MappingProxyType(
    {
        SensorType.temperature: OptimalRange(min=15.0, max=32.0),
        SensorType.humidity: OptimalRange(min=30.0, max=80.0),
        SensorType.soil_moisture: OptimalRange(min=20.0, max=80.0),
        SensorType.light: OptimalRange(min=5000.0, max=12000.0),
        SensorType.soil_ph: OptimalRange(min=5.5, max=7.5),
        SensorType.rainfall: OptimalRange(min=0.0, max=50.0),
        SensorType.water_level: OptimalRange(min=10.0, max=80.0),
    }
)


class ThresholdClassifier:
    """Pure classifier; the range table is shared and never mutated."""

    def __init__(
        self, ranges: Mapping[SensorType, OptimalRange] = DEFAULT_OPTIMAL_RANGES
    ) -> None:
        self._ranges = ranges

    def optimal_range(self, sensor_type: SensorType) -> Optional[OptimalRange]:
        return self._ranges.get(sensor_type)

    def classify(self, value: float, sensor_type: SensorType) -> ClassificationStatus:
        optimal = self._ranges.get(sensor_type)
        if optimal is None:
            return ClassificationStatus.normal

        # A zero minimum makes the low critical bound zero as well.
        if value < optimal.min * CRITICAL_LOW_FACTOR or value > optimal.max * CRITICAL_HIGH_FACTOR:
            return ClassificationStatus.critical
        if value < optimal.min or value > optimal.max:
            return ClassificationStatus.warning
        return ClassificationStatus.normal
