import logging
import threading

from talaiot.adapters.executor_pool import ThreadPoolExecutorAdapter
from talaiot.adapters.executor_sync import SynchronousExecutor


def test_synchronous_executor_runs_inline() -> None:
    calls = []
    SynchronousExecutor().submit(lambda: calls.append(threading.current_thread().name))
    assert calls == [threading.current_thread().name]


def test_pool_runs_work_off_the_calling_thread() -> None:
    names = []
    with ThreadPoolExecutorAdapter(max_workers=1, thread_name_prefix="writer") as executor:
        executor.submit(lambda: names.append(threading.current_thread().name))

    assert len(names) == 1
    assert names[0].startswith("writer")
    assert names[0] != threading.current_thread().name


def test_pool_logs_failed_work(caplog) -> None:
    def _boom() -> None:
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="talaiot.adapters.executor_pool"):
        executor = ThreadPoolExecutorAdapter()
        executor.submit(_boom)
        executor.shutdown(wait=True)

    assert "Publishing task failed: RuntimeError('boom')" in caplog.text


def test_pool_keeps_running_after_a_failure() -> None:
    done = []
    with ThreadPoolExecutorAdapter(max_workers=1) as executor:
        executor.submit(lambda: 1 / 0)
        executor.submit(lambda: done.append(True))
    assert done == [True]
