from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_series
from models.records import SensorType, TimeRange


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for inspecting sensor series through the service API.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the service to answer.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("show")
def show_command(
    ctx: typer.Context,
    sensor_id: str = typer.Argument(..., help="Sensor identifier."),
    sensor_type: SensorType = typer.Option(
        ..., "--type", "-t", case_sensitive=False, help="Sensor category."
    ),
    time_range: TimeRange = typer.Option(TimeRange.day, "--range", "-r", help="Chart window."),
) -> None:
    """Load a time range for a sensor and display its summary."""
    state = _get_state(ctx)
    payload = state.client.get_series(sensor_id, sensor_type.value, time_range.value)
    render_series(payload)


@app.command("refresh")
def refresh_command(
    ctx: typer.Context,
    sensor_id: str = typer.Argument(..., help="Sensor identifier."),
    sensor_type: SensorType = typer.Option(
        ..., "--type", "-t", case_sensitive=False, help="Sensor category."
    ),
) -> None:
    """Reload the currently selected range for a sensor."""
    state = _get_state(ctx)
    payload = state.client.refresh(sensor_id, sensor_type.value)
    render_series(payload)


@app.command("export")
def export_command(
    ctx: typer.Context,
    sensor_id: str = typer.Argument(..., help="Sensor identifier."),
    sensor_type: SensorType = typer.Option(
        ..., "--type", "-t", case_sensitive=False, help="Sensor category."
    ),
    time_range: TimeRange = typer.Option(TimeRange.day, "--range", "-r", help="Chart window."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", dir_okay=False, help="Write CSV here instead of stdout."
    ),
) -> None:
    """Export the full reading series as CSV."""
    state = _get_state(ctx)
    content = state.client.export_csv(sensor_id, sensor_type.value, time_range.value)
    if output is None:
        typer.echo(content, nl=False)
        return
    output.write_text(content)
    typer.secho(f"Wrote {output}", fg=typer.colors.GREEN)
