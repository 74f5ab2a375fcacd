from __future__ import annotations

from talaiot.core.config import InfluxDbPublisherConfiguration


def should_publish_tasks(config: InfluxDbPublisherConfiguration) -> bool:
    """Return True when the per-task series is enabled."""
    return bool(config.publish_task_metrics)


def should_publish_build(config: InfluxDbPublisherConfiguration) -> bool:
    """Return True when the per-build series is enabled."""
    return bool(config.publish_build_metrics)
