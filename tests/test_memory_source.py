"""Unit tests for the in-memory reading source."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

from models.records import Reading
from sources.base import ReadingSource
from sources.memory import InMemoryReadingSource

END = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
START = END - timedelta(hours=24)


def test_in_memory_source_satisfies_protocol() -> None:
    assert isinstance(InMemoryReadingSource(), ReadingSource)


def test_fetch_filters_window_and_caps_to_most_recent() -> None:
    source = InMemoryReadingSource()
    source.add_readings(
        "s1",
        [
            Reading(timestamp=START - timedelta(minutes=1), value=0.0),
            Reading(timestamp=START, value=1.0),
            Reading(timestamp=START + timedelta(hours=1), value=2.0),
            Reading(timestamp=END, value=3.0),
            Reading(timestamp=END + timedelta(minutes=1), value=4.0),
        ],
    )

    assert sorted(r.value for r in source.fetch_readings("s1", START, END, 10)) == [1.0, 2.0, 3.0]
    assert sorted(r.value for r in source.fetch_readings("s1", START, END, 2)) == [2.0, 3.0]


def test_unknown_sensor_returns_empty_list() -> None:
    assert InMemoryReadingSource().fetch_readings("missing", START, END, 96) == []


def test_fixture_file_is_loaded(tmp_path) -> None:
    path = tmp_path / "readings.json"
    path.write_text(
        json.dumps(
            {
                "s1": [
                    {"timestamp": "2024-06-15T10:00:00Z", "value": 20.0},
                    {"timestamp": "2024-06-15T11:00:00+00:00", "value": 22},
                ]
            }
        )
    )

    source = InMemoryReadingSource(fixture_path=path)

    readings = source.fetch_readings("s1", START, END, 96)
    assert sorted(r.value for r in readings) == [20.0, 22.0]


def test_unreadable_fixture_is_ignored(tmp_path) -> None:
    path = tmp_path / "readings.json"
    path.write_text("{not json")

    assert InMemoryReadingSource(fixture_path=path).fetch_readings("s1", START, END, 96) == []
