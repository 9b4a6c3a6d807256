"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field

from models.records import (
    ClassificationStatus,
    DailyAggregate,
    OptimalRange,
    SensorType,
    SensorViewModel,
    SeriesState,
    Statistics,
    TimeRange,
)


class OptimalRangeSchema(BaseModel):
    min: float
    max: float

    @classmethod
    def from_domain(cls, optimal: OptimalRange) -> "OptimalRangeSchema":
        return cls(min=optimal.min, max=optimal.max)


class StatisticsSchema(BaseModel):
    """Window statistics; absent entirely when there is no data."""

    min: float
    max: float
    mean: float
    std_dev: float
    count: int = Field(..., ge=1)
    first_reading_at: dt.datetime
    last_reading_at: dt.datetime

    @classmethod
    def from_domain(cls, stats: Statistics) -> "StatisticsSchema":
        return cls(
            min=stats.min,
            max=stats.max,
            mean=stats.mean,
            std_dev=stats.std_dev,
            count=stats.count,
            first_reading_at=stats.first_reading_at,
            last_reading_at=stats.last_reading_at,
        )


class DailyAggregateSchema(BaseModel):
    date: dt.date
    min: float
    max: float
    mean: float
    count: int = Field(..., ge=1)

    @classmethod
    def from_domain(cls, aggregate: DailyAggregate) -> "DailyAggregateSchema":
        return cls(
            date=aggregate.date,
            min=aggregate.min,
            max=aggregate.max,
            mean=aggregate.mean,
            count=aggregate.count,
        )


class SensorViewModelResponse(BaseModel):
    """Full view model for one sensor detail view."""

    sensor_id: str
    sensor_type: SensorType
    sensor_name: str
    unit: str
    optimal_range: Optional[OptimalRangeSchema] = None
    time_range: Optional[TimeRange] = None
    requested_range: Optional[TimeRange] = None
    state: SeriesState
    current_value: Optional[float] = Field(
        default=None, description="Latest reading value, null when there is no data."
    )
    current_status: ClassificationStatus
    chart_labels: List[str] = Field(default_factory=list)
    chart_series: List[float] = Field(default_factory=list)
    statistics: Optional[StatisticsSchema] = None
    daily_aggregates: List[DailyAggregateSchema] = Field(default_factory=list)
    last_error: Optional[str] = None
    updated_at: Optional[dt.datetime] = None

    @classmethod
    def from_domain(
        cls, model: SensorViewModel, optimal: Optional[OptimalRange] = None
    ) -> "SensorViewModelResponse":
        return cls(
            sensor_id=model.sensor_id,
            sensor_type=model.sensor_type,
            sensor_name=model.sensor_type.display_name,
            unit=model.sensor_type.unit.display,
            optimal_range=OptimalRangeSchema.from_domain(optimal) if optimal else None,
            time_range=model.time_range,
            requested_range=model.requested_range,
            state=model.state,
            current_value=model.current_value,
            current_status=model.current_status,
            chart_labels=list(model.chart_labels),
            chart_series=list(model.chart_series),
            statistics=(
                StatisticsSchema.from_domain(model.statistics)
                if model.statistics is not None
                else None
            ),
            daily_aggregates=[
                DailyAggregateSchema.from_domain(item) for item in model.daily_aggregates
            ],
            last_error=model.last_error,
            updated_at=model.updated_at,
        )
