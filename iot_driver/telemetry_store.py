"""Bounded in-memory telemetry buffer shared by the request handlers.

The store keeps the most recent telemetry rows for the simulated device in
insertion order. Every operation runs under a single ``asyncio.Lock`` that
guards headers and rows together, so readers never observe a half-applied
append.

Usage:
    store = TelemetryStore.seeded()
    await store.append(("1700000000", "21.50", "ok"))
    body = await store.latest_csv()
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, Optional, Sequence, Tuple

from . import constants

LOGGER = logging.getLogger(__name__)

TelemetryRow = Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """Static metadata describing the simulated device."""

    name: str
    model: str
    manufacturer: str
    type: str

    def as_dict(self) -> Dict[str, str]:
        return {
            "device_name": self.name,
            "device_model": self.model,
            "manufacturer": self.manufacturer,
            "device_type": self.type,
        }


def unix_timestamp(clock: Optional[Callable[[], float]] = None) -> str:
    """Render the current time as whole Unix seconds."""
    now = (clock or time.time)()
    return str(int(now))


class TelemetryStore:
    """Ordered, bounded buffer of telemetry rows.

    Rows are kept oldest-first. Appending beyond ``capacity`` evicts the
    oldest row. Callers build rows from the fixed header set; arity is not
    re-checked here.
    """

    def __init__(
        self,
        headers: Sequence[str] = constants.TELEMETRY_HEADERS,
        *,
        capacity: int = constants.DEFAULT_TELEMETRY_CAPACITY,
        rows: Iterable[TelemetryRow] = (),
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._headers: Tuple[str, ...] = tuple(headers)
        self._capacity = capacity
        self._rows: Deque[TelemetryRow] = deque(maxlen=capacity)
        for row in rows:
            self._rows.append(tuple(row))
        self._lock = asyncio.Lock()

    @classmethod
    def seeded(
        cls,
        *,
        capacity: int = constants.DEFAULT_TELEMETRY_CAPACITY,
        clock: Optional[Callable[[], float]] = None,
    ) -> "TelemetryStore":
        """Create the startup buffer holding a single nominal reading."""
        seed = (unix_timestamp(clock), constants.SEED_TEMPERATURE, constants.STATUS_OK)
        return cls(constants.TELEMETRY_HEADERS, capacity=capacity, rows=[seed])

    @property
    def headers(self) -> Tuple[str, ...]:
        return self._headers

    @property
    def capacity(self) -> int:
        return self._capacity

    async def latest_csv(self) -> str:
        """Return the header line followed by the newest row.

        The row line carries no trailing newline. An empty buffer yields the
        header line alone.
        """
        async with self._lock:
            csv = ",".join(self._headers) + "\n"
            if self._rows:
                csv += ",".join(self._rows[-1])
            return csv

    async def all_csv(self) -> str:
        """Return the header line and every row, oldest first, one per line."""
        async with self._lock:
            lines = [",".join(self._headers)]
            lines.extend(",".join(row) for row in self._rows)
        return "\n".join(lines) + "\n"

    async def append(self, row: TelemetryRow) -> None:
        async with self._lock:
            evicted = self._rows[0] if len(self._rows) == self._capacity else None
            self._rows.append(tuple(row))

        if evicted is not None:
            LOGGER.debug("Telemetry buffer full; evicted row %s", ",".join(evicted))

    async def snapshot(self) -> Tuple[TelemetryRow, ...]:
        async with self._lock:
            return tuple(self._rows)
