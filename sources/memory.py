from __future__ import annotations

import json
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, List, Optional

from models.records import Reading
from settings import get_settings
from sources.base import ReadingSource, parse_timestamp
from sources.http import HttpReadingSource


class InMemoryReadingSource:
    """Reading source backed by a dict of per-sensor readings.

    Optionally seeded from a JSON fixture mapping sensor ids to lists of
    ``{"timestamp": ..., "value": ...}`` rows.
    """

    def __init__(self, fixture_path: Optional[Path] = None) -> None:
        self._readings: Dict[str, List[Reading]] = {}
        self.fixture_path = fixture_path
        self._lock = Lock()
        if fixture_path:
            self._load_from_disk()

    def add_readings(self, sensor_id: str, readings: Iterable[Reading]) -> None:
        with self._lock:
            self._readings.setdefault(sensor_id, []).extend(readings)

    def fetch_readings(
        self,
        sensor_id: str,
        start_time: datetime,
        end_time: datetime,
        sample_cap: int,
    ) -> List[Reading]:
        """Return the most recent ``sample_cap`` readings inside the window."""

        with self._lock:
            stored = list(self._readings.get(sensor_id, ()))
        in_window = [r for r in stored if start_time <= r.timestamp <= end_time]
        in_window.sort(key=lambda reading: reading.timestamp, reverse=True)
        return in_window[:sample_cap]

    def _load_from_disk(self) -> None:
        if not self.fixture_path or not self.fixture_path.exists():
            return

        try:
            raw = self.fixture_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            data = {}

        for sensor_id, rows in data.items():
            self._readings[str(sensor_id)] = [
                Reading(timestamp=parse_timestamp(row["timestamp"]), value=float(row["value"]))
                for row in rows
            ]


@lru_cache
def build_default_source() -> ReadingSource:
    settings = get_settings()
    if settings.reading_source_url:
        return HttpReadingSource(
            base_url=settings.reading_source_url,
            timeout=settings.source_timeout,
            retries=settings.source_retries,
            backoff=settings.source_backoff,
        )
    fixture = Path(settings.readings_fixture_path) if settings.readings_fixture_path else None
    return InMemoryReadingSource(fixture_path=fixture)
