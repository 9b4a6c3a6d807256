"""REST-backed reading source."""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

import httpx

from models.records import Reading
from sources.base import FetchFailure, parse_timestamp

logger = logging.getLogger(__name__)

_RETRYABLE_CLIENT_STATUSES = {408, 429}


def _isoformat(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class HttpReadingSource:
    """Fetches ``/sensors/{id}/data`` with retries and exponential backoff."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        retries: int = 3,
        backoff: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.retries = retries
        self.backoff = backoff
        self._sleep = sleep
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def fetch_readings(
        self,
        sensor_id: str,
        start_time: datetime,
        end_time: datetime,
        sample_cap: int,
    ) -> List[Reading]:
        params = {
            "startDate": _isoformat(start_time),
            "endDate": _isoformat(end_time),
            "limit": sample_cap,
        }
        payload = self._get_with_retry(sensor_id, f"/sensors/{sensor_id}/data", params)
        return self._parse_readings(sensor_id, payload)

    def _get_with_retry(self, sensor_id: str, path: str, params: dict[str, Any]) -> Any:
        attempt = 0
        while True:
            try:
                response = self._client.get(path, params=params)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                reason = f"HTTP {status_code}"
                retryable = status_code >= 500 or status_code in _RETRYABLE_CLIENT_STATUSES
            except httpx.HTTPError as exc:
                status_code = None
                reason = str(exc) or exc.__class__.__name__
                retryable = True
            except ValueError as exc:
                raise FetchFailure(sensor_id, "Reading source returned invalid JSON.") from exc

            if not retryable or attempt >= self.retries:
                raise FetchFailure(
                    sensor_id,
                    f"Failed to fetch readings for sensor {sensor_id!r}: {reason}",
                )

            delay = self.backoff * (2**attempt) * random.uniform(0.5, 1.0)
            logger.warning(
                "Retrying reading fetch",
                extra={
                    "sensor_id": sensor_id,
                    "attempt": attempt + 1,
                    "status_code": status_code,
                    "reason": reason,
                },
            )
            self._sleep(delay)
            attempt += 1

    @staticmethod
    def _parse_readings(sensor_id: str, payload: Any) -> List[Reading]:
        rows = payload.get("data") if isinstance(payload, dict) else None
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise FetchFailure(sensor_id, "Unexpected readings payload.")

        readings: List[Reading] = []
        for row in rows:
            try:
                timestamp = parse_timestamp(str(row["timestamp"]))
                value = float(row["value"])
            except (KeyError, TypeError, ValueError) as exc:
                raise FetchFailure(sensor_id, f"Malformed reading in payload: {row!r}") from exc
            readings.append(Reading(timestamp=timestamp, value=value))
        return readings
