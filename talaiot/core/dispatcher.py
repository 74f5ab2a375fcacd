from __future__ import annotations

import logging
from typing import Sequence

from talaiot.core.errors import WriteError
from talaiot.core.models import Point, WriteTarget
from talaiot.core.redaction import redact_text
from talaiot.ports.executor import Executor
from talaiot.ports.store_client import StoreClient


logger = logging.getLogger(__name__)


class Dispatcher:
    """Hand point batches to the store through an execution strategy.

    Each batch becomes one unit of work and one write call. A failed write is
    logged once and dropped; nothing is retried.
    """
    def __init__(self, store_client: StoreClient, executor: Executor) -> None:
        self.store_client = store_client
        self.executor = executor

    def dispatch(self, batch: Sequence[Point], target: WriteTarget) -> bool:
        """Submit a batch for writing.

        Args:
            batch (Sequence[Point]): Points of a single series.
            target (WriteTarget): Database and retention policy to write to.

        Returns:
            bool: True when a write was submitted, False for an empty batch.
        """
        if not batch:
            return False
        points = tuple(batch)
        self.executor.submit(lambda: self._write(points, target))
        return True

    def _write(self, points: tuple[Point, ...], target: WriteTarget) -> None:
        measurement = points[0].measurement
        try:
            self.store_client.write(points, target.database, target.retention_policy)
        except WriteError as exc:
            logger.error(
                "Write of %d %s point(s) to %s.%s failed: %s",
                len(points),
                measurement,
                target.database,
                target.retention_policy,
                redact_text(str(exc)),
            )
            return
        except Exception as exc:
            logger.error(
                "Unexpected error writing %d %s point(s) to %s.%s: %s",
                len(points),
                measurement,
                target.database,
                target.retention_policy,
                redact_text(repr(exc)),
            )
            return
        logger.debug(
            "Wrote %d %s point(s) to %s.%s",
            len(points),
            measurement,
            target.database,
            target.retention_policy,
        )
