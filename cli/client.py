from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the sensor series service."""

    def __init__(self, config: CLIConfig, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url, timeout=config.timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def get_series(self, sensor_id: str, sensor_type: str, time_range: str) -> Dict[str, Any]:
        response = self._request(
            "GET",
            f"/sensors/{sensor_id}/series",
            params={"sensor_type": sensor_type, "range": time_range},
        )
        return response.json()

    def refresh(self, sensor_id: str, sensor_type: str) -> Dict[str, Any]:
        response = self._request(
            "POST",
            f"/sensors/{sensor_id}/refresh",
            params={"sensor_type": sensor_type},
        )
        return response.json()

    def export_csv(self, sensor_id: str, sensor_type: str, time_range: str) -> str:
        response = self._request(
            "GET",
            f"/sensors/{sensor_id}/export",
            params={"sensor_type": sensor_type, "range": time_range},
        )
        return response.text

    def _request(self, method: str, path: str, params: Dict[str, str]) -> httpx.Response:
        try:
            response = self._client.request(method, path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.HTTPError as exc:
            typer.secho(f"Request failed: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        return response

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        if not isinstance(detail, str):
            detail = str(detail) if detail else None
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
