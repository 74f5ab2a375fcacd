from __future__ import annotations

from typing import Callable, Protocol


class Executor(Protocol):
    """Strategy that decides where a unit of publishing work runs."""
    def submit(self, work: Callable[[], None]) -> None:
        """Run ``work`` now or later; implementations must accept concurrent callers.

        Args:
            work (Callable[[], None]): Self-contained unit of work.
        """
        ...
