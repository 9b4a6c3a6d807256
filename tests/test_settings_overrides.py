from __future__ import annotations

from typing import Iterable

from services.controller import build_default_registry
from settings import get_settings
from sources.http import HttpReadingSource
from sources.memory import InMemoryReadingSource, build_default_source


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


CACHES = (get_settings, build_default_source, build_default_registry)


def test_defaults_use_in_memory_source(monkeypatch) -> None:
    for name in ("READING_SOURCE_URL", "CHART_MAX_LABELS", "ANALYTICS_DAYS", "SENSOR_TIMEZONE"):
        monkeypatch.delenv(name, raising=False)
    _clear_caches(CACHES)

    try:
        settings = get_settings()
        assert settings.chart_max_labels == 6
        assert settings.analytics_days is None
        assert settings.timezone == "UTC"
        assert isinstance(build_default_source(), InMemoryReadingSource)
    finally:
        _clear_caches(CACHES)


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("READING_SOURCE_URL", "http://backend.test/api")
    monkeypatch.setenv("READING_SOURCE_TIMEOUT", "2.5")
    monkeypatch.setenv("READING_SOURCE_RETRIES", "0")
    monkeypatch.setenv("CHART_MAX_LABELS", "8")
    monkeypatch.setenv("ANALYTICS_DAYS", "4")
    monkeypatch.setenv("CONTROLLER_WORKER_COUNT", "3")
    monkeypatch.setenv("SENSOR_TIMEZONE", "Not/AZone")
    _clear_caches(CACHES)

    registry = build_default_registry()
    try:
        source = registry.source
        assert isinstance(source, HttpReadingSource)
        assert source.retries == 0
        assert registry.max_labels == 8
        assert registry.analytics_days == 4
        assert registry.executor._max_workers == 3
        assert registry.tz.utcoffset(None).total_seconds() == 0
    finally:
        registry.shutdown()
        source.close()
        _clear_caches(CACHES)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("CHART_MAX_LABELS", "zero")
    monkeypatch.setenv("CONTROLLER_WORKER_COUNT", "-1")
    monkeypatch.setenv("READING_SOURCE_TIMEOUT", "")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    _clear_caches(CACHES)

    try:
        settings = get_settings()
        assert settings.chart_max_labels == 6
        assert settings.controller_workers == 2
        assert settings.source_timeout == 10.0
        assert settings.log_level == "DEBUG"
    finally:
        _clear_caches(CACHES)
