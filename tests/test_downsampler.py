from __future__ import annotations

from datetime import datetime, timedelta, timezone

from models.records import Reading, TimeRange
from services.downsampler import LabelDownsampler, format_label

START = datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc)


def _series(count: int, spacing: timedelta = timedelta(minutes=15)) -> list[Reading]:
    return [Reading(timestamp=START + spacing * i, value=float(i)) for i in range(count)]


def test_empty_series_returns_no_labels() -> None:
    assert LabelDownsampler().downsample([], 6, TimeRange.day) == []


def test_non_positive_budget_returns_no_labels() -> None:
    assert LabelDownsampler().downsample(_series(5), 0, TimeRange.day) == []


def test_short_series_keeps_every_label() -> None:
    labels = LabelDownsampler().downsample(_series(3), 6, TimeRange.day)

    assert labels == ["00:00", "00:15", "00:30"]


def test_stride_selects_every_step_th_label() -> None:
    series = _series(96)
    labels = LabelDownsampler().downsample(series, 6, TimeRange.day)

    # ceil(96 / 6) = 16
    expected = [format_label(series[i].timestamp, TimeRange.day) for i in range(0, 96, 16)]
    assert labels == expected
    assert len(labels) == 6


def test_label_count_never_exceeds_budget_and_preserves_order() -> None:
    downsampler = LabelDownsampler()
    for count in (1, 2, 7, 13, 50, 97):
        series = _series(count)
        all_labels = [format_label(r.timestamp, TimeRange.day) for r in series]
        for budget in (1, 2, 5, 6, 10):
            labels = downsampler.downsample(series, budget, TimeRange.day)
            assert len(labels) <= budget
            iterator = iter(all_labels)
            assert all(label in iterator for label in labels)


def test_week_and_month_use_month_day_format() -> None:
    series = _series(3, spacing=timedelta(days=1))

    assert LabelDownsampler().downsample(series, 6, TimeRange.week) == ["3/1", "3/2", "3/3"]
    assert LabelDownsampler().downsample(series, 6, TimeRange.month) == ["3/1", "3/2", "3/3"]


def test_labels_use_configured_timezone() -> None:
    tz = timezone(timedelta(hours=7))
    series = [Reading(timestamp=datetime(2024, 3, 1, 20, 5, tzinfo=timezone.utc), value=1.0)]

    assert LabelDownsampler(tz=tz).downsample(series, 6, TimeRange.day) == ["03:05"]
    assert LabelDownsampler(tz=tz).downsample(series, 6, TimeRange.week) == ["3/2"]


def test_downsample_does_not_touch_series() -> None:
    series = _series(20)
    snapshot = list(series)

    LabelDownsampler().downsample(series, 4, TimeRange.day)

    assert series == snapshot
