from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Sequence

from talaiot.core.models import Point


@dataclass(frozen=True)
class RecordedWrite:
    database: str
    retention_policy: str
    points: tuple[Point, ...]


@dataclass
class InMemoryStoreClient:
    """Store client that keeps every write in memory for dry runs and tests."""
    writes: list[RecordedWrite] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def write(self, points: Sequence[Point], database: str, retention_policy: str) -> None:
        with self._lock:
            self.writes.append(RecordedWrite(database, retention_policy, tuple(points)))

    def points(self, measurement: str, database: str | None = None) -> list[Point]:
        """Return written points of a measurement, optionally for one database."""
        with self._lock:
            writes = list(self.writes)
        return [
            point
            for write in writes
            if database is None or write.database == database
            for point in write.points
            if point.measurement == measurement
        ]
