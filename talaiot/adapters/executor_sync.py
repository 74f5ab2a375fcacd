from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass
class SynchronousExecutor:
    def submit(self, work: Callable[[], None]) -> None:
        """Run work inline so tests can assert right after ``publish``."""
        work()
