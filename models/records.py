"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


class SensorUnit(str, Enum):
    """Measurement units reported by the backend."""

    celsius = "CELSIUS"
    percent = "PERCENT"
    lux = "LUX"
    meter = "METER"
    millimeter = "MILLIMETER"
    ph = "PH"
    liter = "LITER"

    @property
    def display(self) -> str:
        return _UNIT_DISPLAY[self]


_UNIT_DISPLAY = {
    SensorUnit.celsius: "°C",
    SensorUnit.percent: "%",
    SensorUnit.lux: "lux",
    SensorUnit.meter: "m",
    SensorUnit.millimeter: "mm",
    SensorUnit.ph: "pH",
    SensorUnit.liter: "L",
}


class SensorType(str, Enum):
    """Sensor categories; each one selects an optimal range and a unit."""

    temperature = "TEMPERATURE"
    humidity = "HUMIDITY"
    soil_moisture = "SOIL_MOISTURE"
    light = "LIGHT"
    water_level = "WATER_LEVEL"
    rainfall = "RAINFALL"
    soil_ph = "SOIL_PH"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title().replace("Ph", "pH")

    @property
    def unit(self) -> SensorUnit:
        return _SENSOR_UNITS[self]


_SENSOR_UNITS = {
    SensorType.temperature: SensorUnit.celsius,
    SensorType.humidity: SensorUnit.percent,
    SensorType.soil_moisture: SensorUnit.percent,
    SensorType.light: SensorUnit.lux,
    SensorType.water_level: SensorUnit.meter,
    SensorType.rainfall: SensorUnit.millimeter,
    SensorType.soil_ph: SensorUnit.ph,
}


class TimeRange(str, Enum):
    """User-selectable chart windows."""

    day = "24h"
    week = "7d"
    month = "30d"


class ClassificationStatus(str, Enum):
    normal = "normal"
    warning = "warning"
    critical = "critical"


class SeriesState(str, Enum):
    """Lifecycle of a sensor series view."""

    idle = "idle"
    loading = "loading"
    ready = "ready"
    error = "error"


@dataclass(frozen=True, slots=True)
class OptimalRange:
    min: float
    max: float


@dataclass(frozen=True, slots=True)
class Reading:
    """A single timestamped sensor measurement."""

    timestamp: datetime
    value: float


@dataclass(frozen=True, slots=True)
class Statistics:
    """Aggregate statistics over a non-empty reading window."""

    min: float
    max: float
    mean: float
    std_dev: float
    count: int
    first_reading_at: datetime
    last_reading_at: datetime


@dataclass(frozen=True, slots=True)
class DailyAggregate:
    """Per-calendar-day summary of readings."""

    date: date
    min: float
    max: float
    mean: float
    count: int


@dataclass(frozen=True)
class SensorViewModel:
    """Everything a sensor detail view renders, replaced wholesale on update.

    ``None`` stands for "no data" in ``current_value`` and ``statistics``.
    ``time_range`` is the range the data belongs to; ``requested_range`` is
    the latest range asked for, which differs while loading or after a failure.
    """

    sensor_id: str
    sensor_type: SensorType
    time_range: Optional[TimeRange] = None
    requested_range: Optional[TimeRange] = None
    state: SeriesState = SeriesState.idle
    current_value: Optional[float] = None
    current_status: ClassificationStatus = ClassificationStatus.normal
    chart_labels: Tuple[str, ...] = ()
    chart_series: Tuple[float, ...] = ()
    readings: Tuple[Reading, ...] = field(default=(), repr=False)
    statistics: Optional[Statistics] = None
    daily_aggregates: Tuple[DailyAggregate, ...] = ()
    last_error: Optional[str] = None
    updated_at: Optional[datetime] = None
