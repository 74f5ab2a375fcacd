from __future__ import annotations

from typing import Protocol, Sequence

from talaiot.core.models import Point


class StoreClient(Protocol):
    """Write boundary to the time-series store."""
    def write(self, points: Sequence[Point], database: str, retention_policy: str) -> None:
        """Write a batch of points in a single request.

        Args:
            points (Sequence[Point]): Points to write, fields in declared order.
            database (str): Target database name.
            retention_policy (str): Externally provisioned retention policy.

        Raises:
            WriteError: If the store cannot be reached or rejects the batch.
        """
        ...
