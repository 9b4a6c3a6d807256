from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

_STATUS_COLORS = {
    "normal": typer.colors.GREEN,
    "warning": typer.colors.YELLOW,
    "critical": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _with_unit(value: Any, unit: str) -> str:
    if value is None:
        return "No data"
    if isinstance(value, float):
        return f"{value:.2f}{unit}"
    return f"{value}{unit}"


def render_series(payload: Dict[str, Any]) -> None:
    unit = payload.get("unit") or ""
    echo_heading(f"{payload.get('sensor_name')} ({payload.get('sensor_id')})")
    echo_key_values(
        [
            ("range", payload.get("time_range")),
            ("state", payload.get("state")),
            ("current_value", _with_unit(payload.get("current_value"), unit)),
        ]
    )
    requested = payload.get("requested_range")
    if requested and requested != payload.get("time_range"):
        typer.echo(f"requested_range: {requested}")
    status = payload.get("current_status") or "normal"
    typer.secho(f"status: {status}", fg=_STATUS_COLORS.get(status))
    optimal = payload.get("optimal_range")
    if optimal:
        typer.echo(f"optimal_range: {optimal.get('min')}-{optimal.get('max')}{unit}")

    error = payload.get("last_error")
    if error:
        typer.secho(f"error: {error}", fg=typer.colors.RED)

    labels = payload.get("chart_labels") or []
    typer.echo()
    echo_heading("Chart")
    typer.echo(f"points: {len(payload.get('chart_series') or [])}")
    typer.echo(f"labels: {' '.join(labels) if labels else '-'}")

    statistics = payload.get("statistics")
    typer.echo()
    echo_heading("Statistics")
    if statistics:
        echo_key_values(
            [
                ("count", statistics.get("count")),
                ("min", _with_unit(statistics.get("min"), unit)),
                ("max", _with_unit(statistics.get("max"), unit)),
                ("mean", _with_unit(statistics.get("mean"), unit)),
                ("std_dev", _with_unit(statistics.get("std_dev"), unit)),
            ]
        )
    else:
        typer.echo("No data available.")

    daily = payload.get("daily_aggregates") or []
    typer.echo()
    echo_heading("Daily")
    if daily:
        for entry in daily:
            typer.echo(
                f"  - {entry.get('date')}: "
                f"min {_with_unit(entry.get('min'), unit)}, "
                f"max {_with_unit(entry.get('max'), unit)}, "
                f"avg {_with_unit(entry.get('mean'), unit)} "
                f"({entry.get('count')} readings)"
            )
    else:
        typer.echo("No daily data.")
