"""Contract for the collaborators that supply raw readings."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Protocol, runtime_checkable

from models.records import Reading


class FetchFailure(Exception):
    """A reading source could not return data for a sensor."""

    def __init__(self, sensor_id: str, message: str) -> None:
        super().__init__(message)
        self.sensor_id = sensor_id
        self.message = message


@runtime_checkable
class ReadingSource(Protocol):
    def fetch_readings(
        self,
        sensor_id: str,
        start_time: datetime,
        end_time: datetime,
        sample_cap: int,
    ) -> List[Reading]:
        """Return readings in the window, in any order; may be empty.

        Raises ``FetchFailure`` when the data cannot be retrieved.
        """
        ...


def parse_timestamp(value: str) -> datetime:
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError("Invalid timestamp format") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)
