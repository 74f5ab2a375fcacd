from __future__ import annotations

from typing import Protocol

from talaiot.core.models import ExecutionReport


class Publisher(Protocol):
    """Publishing boundary for build execution reports."""
    def publish(self, report: ExecutionReport) -> None:
        """Publish one build's report for downstream systems.

        Args:
            report (ExecutionReport): Completed, immutable report of the build.
        """
        ...
