from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_SOURCE_URL_ENV = "READING_SOURCE_URL"
_FIXTURE_PATH_ENV = "READINGS_FIXTURE_PATH"
_SOURCE_TIMEOUT_ENV = "READING_SOURCE_TIMEOUT"
_SOURCE_RETRIES_ENV = "READING_SOURCE_RETRIES"
_SOURCE_BACKOFF_ENV = "READING_SOURCE_BACKOFF"
_TIMEZONE_ENV = "SENSOR_TIMEZONE"
_MAX_LABELS_ENV = "CHART_MAX_LABELS"
_ANALYTICS_DAYS_ENV = "ANALYTICS_DAYS"
_WORKER_COUNT_ENV = "CONTROLLER_WORKER_COUNT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    reading_source_url: Optional[str]
    readings_fixture_path: Optional[str]
    source_timeout: float
    source_retries: int
    source_backoff: float
    timezone: str
    chart_max_labels: int
    analytics_days: Optional[int]
    controller_workers: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_int_env(name: str, default: Optional[int], minimum: int = 1) -> Optional[int]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _read_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        reading_source_url=_read_optional_env(_SOURCE_URL_ENV, None),
        readings_fixture_path=_read_optional_env(_FIXTURE_PATH_ENV, None),
        source_timeout=_read_float_env(_SOURCE_TIMEOUT_ENV, 10.0),
        source_retries=_read_int_env(_SOURCE_RETRIES_ENV, 3, minimum=0),
        source_backoff=_read_float_env(_SOURCE_BACKOFF_ENV, 1.0),
        timezone=_read_str_env(_TIMEZONE_ENV, "UTC"),
        chart_max_labels=_read_int_env(_MAX_LABELS_ENV, 6),
        analytics_days=_read_int_env(_ANALYTICS_DAYS_ENV, None),
        controller_workers=_read_int_env(_WORKER_COUNT_ENV, 2),
        log_level=_read_log_level("INFO"),
    )
