from __future__ import annotations

import logging
import threading

from talaiot.adapters.store_influxdb import InfluxDbStoreClient
from talaiot.core.config import InfluxDbPublisherConfiguration
from talaiot.core.dispatcher import Dispatcher
from talaiot.core.errors import MappingError
from talaiot.core.gate import should_publish_build, should_publish_tasks
from talaiot.core.mapper import map_build_point, map_task_points
from talaiot.core.models import ExecutionReport, WriteTarget
from talaiot.core.redaction import redact_text
from talaiot.ports.executor import Executor
from talaiot.ports.store_client import StoreClient


logger = logging.getLogger(__name__)


class InfluxDbPublisher:
    def __init__(
        self,
        configuration: InfluxDbPublisherConfiguration,
        executor: Executor,
        store_client: StoreClient | None = None,
    ) -> None:
        self.configuration = configuration
        self.executor = executor
        self._store_client = store_client
        self._owns_store_client = store_client is None
        self._lock = threading.Lock()

    def publish(self, report: ExecutionReport) -> None:
        """Map the report to task and build points and submit the writes.

        Args:
            report (ExecutionReport): Completed report of one build.

        Raises:
            ConfigurationError: If ``db_name`` or ``url`` is missing.

        Notes:
            Mapping and write failures are logged and never raised; telemetry
            must not fail the build it describes. A disabled series is never
            mapped, so no empty write reaches the store.
        """
        config = self.configuration
        config.validate()

        dispatcher = Dispatcher(self._resolve_store_client(), self.executor)
        target = WriteTarget(database=config.db_name, retention_policy=config.retention_policy)
        custom = report.custom_properties

        if should_publish_tasks(config):
            task_points = map_task_points(report.tasks, custom.task_properties, config.task_metric_name)
            if dispatcher.dispatch(task_points, target):
                logger.debug("Submitted %d %s point(s)", len(task_points), config.task_metric_name)
        else:
            logger.debug("Task metrics disabled, skipping %s", config.task_metric_name)

        if should_publish_build(config):
            try:
                build_point = map_build_point(report, custom.build_properties, config.build_metric_name)
            except MappingError as exc:
                logger.warning("Dropping %s point for build: %s", config.build_metric_name, exc)
            else:
                dispatcher.dispatch([build_point], target)
                logger.debug("Submitted 1 %s point", config.build_metric_name)
        else:
            logger.debug("Build metrics disabled, skipping %s", config.build_metric_name)

    def close(self) -> None:
        """Release the store client built from the configuration.

        An injected client belongs to the caller and is left open. Drain the
        executor first so no pending write hits a closed client.
        """
        with self._lock:
            if not self._owns_store_client or self._store_client is None:
                return
            client, self._store_client = self._store_client, None
        client.close()

    def __enter__(self) -> "InfluxDbPublisher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _resolve_store_client(self) -> StoreClient:
        with self._lock:
            if self._store_client is None:
                config = self.configuration
                logger.info("Publishing to %s (database %s)", redact_text(config.url), config.db_name)
                self._store_client = InfluxDbStoreClient(
                    url=config.url,
                    username=config.username,
                    password=config.password,
                    timeout_ms=config.timeout_ms,
                )
            return self._store_client
