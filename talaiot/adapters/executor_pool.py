from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable


logger = logging.getLogger(__name__)


class ThreadPoolExecutorAdapter:
    """Run publishing work on a bounded pool of worker threads.

    ``submit`` returns immediately; the caller never waits on the store.
    Errors raised by a unit of work are logged from the future callback.
    """
    def __init__(self, max_workers: int = 2, thread_name_prefix: str = "talaiot-publisher") -> None:
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=thread_name_prefix)

    def submit(self, work: Callable[[], None]) -> None:
        future = self._pool.submit(work)
        future.add_done_callback(_log_failure)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with ``wait`` pending writes are drained first."""
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> "ThreadPoolExecutorAdapter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)


def _log_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Publishing task failed: %r", exc)
