"""Orchestration of fetch, ordering and aggregation for sensor views."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from functools import lru_cache
from threading import Lock
from typing import Callable, Dict, Optional, Sequence, Tuple

from models.records import (
    ClassificationStatus,
    Reading,
    SensorType,
    SensorViewModel,
    SeriesState,
    TimeRange,
)
from services.aggregator import DailyBucketAggregator, StatisticsAggregator
from services.classifier import ThresholdClassifier
from services.downsampler import LabelDownsampler
from services.time_range import TimeRangeResolver
from services.timeutil import now_utc, resolve_timezone
from settings import get_settings
from sources.base import FetchFailure, ReadingSource
from sources.memory import build_default_source

logger = logging.getLogger(__name__)

DEFAULT_MAX_LABELS = 6


class SensorSeriesController:
    """Owns the view model of one sensor detail view.

    Every range selection or refresh starts a new generation. A fetch result
    is applied only while its generation is still the latest, so a slow
    response for a superseded range never overwrites newer data.
    """

    def __init__(
        self,
        sensor_id: str,
        sensor_type: SensorType,
        source: ReadingSource,
        executor: Executor,
        resolver: Optional[TimeRangeResolver] = None,
        classifier: Optional[ThresholdClassifier] = None,
        downsampler: Optional[LabelDownsampler] = None,
        aggregator: Optional[StatisticsAggregator] = None,
        daily_aggregator: Optional[DailyBucketAggregator] = None,
        clock: Callable[[], datetime] = now_utc,
        max_labels: int = DEFAULT_MAX_LABELS,
        analytics_days: Optional[int] = None,
    ) -> None:
        self.sensor_id = sensor_id
        self.sensor_type = sensor_type
        self.source = source
        self.executor = executor
        self.resolver = resolver or TimeRangeResolver()
        self.classifier = classifier or ThresholdClassifier()
        self.downsampler = downsampler or LabelDownsampler()
        self.aggregator = aggregator or StatisticsAggregator()
        self.daily_aggregator = daily_aggregator or DailyBucketAggregator()
        self.clock = clock
        self.max_labels = max_labels
        self.analytics_days = analytics_days

        self._lock = Lock()
        self._generation = 0
        self._pending: Optional[Future[bool]] = None
        self._view_model = SensorViewModel(sensor_id=sensor_id, sensor_type=sensor_type)

    @property
    def view_model(self) -> SensorViewModel:
        with self._lock:
            return self._view_model

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def pending(self) -> Optional[Future[bool]]:
        """The outstanding request of the latest generation, if any."""
        with self._lock:
            return self._pending

    def select_range(self, time_range: TimeRange) -> Future[bool]:
        """Load ``time_range``; the future resolves to whether it was applied."""
        return self._issue(time_range)

    def refresh(self) -> Future[bool]:
        """Reload the most recently requested range (24h when nothing was requested)."""
        with self._lock:
            time_range = self._view_model.requested_range or TimeRange.day
        return self._issue(time_range)

    def _issue(self, time_range: TimeRange) -> Future[bool]:
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._pending is not None:
                self._pending.cancel()
            self._view_model = replace(
                self._view_model, state=SeriesState.loading, requested_range=time_range
            )

        future = self.executor.submit(self._load, generation, time_range)
        with self._lock:
            if generation == self._generation and not future.done():
                self._pending = future

        logger.debug(
            "Requested readings",
            extra={
                "sensor_id": self.sensor_id,
                "time_range": time_range.value,
                "generation": generation,
            },
        )
        return future

    def _load(self, generation: int, time_range: TimeRange) -> bool:
        try:
            window = self.resolver.resolve(time_range, self.clock())
            readings = self.source.fetch_readings(
                self.sensor_id, window.start_time, window.end_time, window.sample_cap
            )
            ordered = sorted(readings, key=lambda reading: reading.timestamp)
            model = self.build_view_model(time_range, ordered)
        except FetchFailure as exc:
            return self._apply_failure(generation, time_range, exc)
        except Exception as exc:
            logger.exception(
                "Unexpected error while loading readings",
                extra={
                    "sensor_id": self.sensor_id,
                    "time_range": time_range.value,
                    "generation": generation,
                },
            )
            return self._apply_failure(generation, time_range, exc)

        return self._apply(generation, model)

    def build_view_model(
        self, time_range: TimeRange, ordered: Sequence[Reading]
    ) -> SensorViewModel:
        """Compute the ready view model for chronologically sorted readings."""
        if ordered:
            current_value: Optional[float] = ordered[-1].value
            current_status = self.classifier.classify(current_value, self.sensor_type)
        else:
            current_value = None
            current_status = ClassificationStatus.normal

        return SensorViewModel(
            sensor_id=self.sensor_id,
            sensor_type=self.sensor_type,
            time_range=time_range,
            requested_range=time_range,
            state=SeriesState.ready,
            current_value=current_value,
            current_status=current_status,
            chart_labels=tuple(
                self.downsampler.downsample(ordered, self.max_labels, time_range)
            ),
            chart_series=tuple(reading.value for reading in ordered),
            readings=tuple(ordered),
            statistics=self.aggregator.aggregate(ordered),
            daily_aggregates=tuple(
                self.daily_aggregator.bucket_by_day(ordered, limit=self.analytics_days)
            ),
            last_error=None,
            updated_at=self.clock(),
        )

    def _apply(self, generation: int, model: SensorViewModel) -> bool:
        with self._lock:
            if generation != self._generation:
                stale = True
            else:
                stale = False
                self._view_model = model
                self._pending = None

        if stale:
            logger.info(
                "Discarded stale readings",
                extra={
                    "sensor_id": self.sensor_id,
                    "time_range": model.time_range.value if model.time_range else None,
                    "generation": generation,
                },
            )
            return False

        logger.debug(
            "Applied view model",
            extra={
                "sensor_id": self.sensor_id,
                "time_range": model.time_range.value if model.time_range else None,
                "generation": generation,
                "reading_count": len(model.chart_series),
                "state": model.state.value,
            },
        )
        return True

    def _apply_failure(
        self, generation: int, time_range: TimeRange, exc: Exception
    ) -> bool:
        reason = str(exc) or type(exc).__name__
        with self._lock:
            if generation != self._generation:
                return False
            # time_range stays with the retained data, not the failed request.
            self._view_model = replace(
                self._view_model, state=SeriesState.error, last_error=reason
            )
            self._pending = None

        logger.warning(
            "Failed to fetch readings",
            extra={
                "sensor_id": self.sensor_id,
                "time_range": time_range.value,
                "generation": generation,
                "reason": reason,
            },
        )
        return True


class ControllerRegistry:
    """One controller per sensor view, sharing a worker pool."""

    def __init__(
        self,
        source: ReadingSource,
        workers: int = 2,
        max_labels: int = DEFAULT_MAX_LABELS,
        analytics_days: Optional[int] = None,
        timezone_name: str = "UTC",
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.source = source
        self.max_labels = max_labels
        self.analytics_days = analytics_days
        self.clock = clock
        self.tz = resolve_timezone(timezone_name)
        self.executor = ThreadPoolExecutor(max_workers=workers)
        self._classifier = ThresholdClassifier()
        self._controllers: Dict[Tuple[str, SensorType], SensorSeriesController] = {}
        self._controllers_lock = Lock()

    def get(self, sensor_id: str, sensor_type: SensorType) -> SensorSeriesController:
        key = (sensor_id, sensor_type)
        with self._controllers_lock:
            controller = self._controllers.get(key)
            if controller is None:
                controller = SensorSeriesController(
                    sensor_id=sensor_id,
                    sensor_type=sensor_type,
                    source=self.source,
                    executor=self.executor,
                    classifier=self._classifier,
                    downsampler=LabelDownsampler(tz=self.tz),
                    daily_aggregator=DailyBucketAggregator(tz=self.tz),
                    clock=self.clock,
                    max_labels=self.max_labels,
                    analytics_days=self.analytics_days,
                )
                self._controllers[key] = controller
            return controller

    def shutdown(self) -> None:
        """Clean up executor resources during application shutdown."""
        self.executor.shutdown(wait=False, cancel_futures=True)


@lru_cache
def build_default_registry() -> ControllerRegistry:
    """Factory that wires the registry from settings."""
    settings = get_settings()
    return ControllerRegistry(
        source=build_default_source(),
        workers=settings.controller_workers,
        max_labels=settings.chart_max_labels,
        analytics_days=settings.analytics_days,
        timezone_name=settings.timezone,
    )
