from __future__ import annotations

import csv
import io
from typing import Iterable

from models.records import Reading


def to_csv(readings: Iterable[Reading]) -> str:
    """Render readings as ``Timestamp,Value`` rows in series order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Timestamp", "Value"])
    for reading in readings:
        writer.writerow([reading.timestamp.isoformat(), repr(reading.value)])
    return buffer.getvalue()
