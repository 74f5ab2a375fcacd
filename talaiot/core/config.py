from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from jsonschema import Draft7Validator

from talaiot.core.errors import ConfigurationError
from talaiot.core.redaction import redact_data


DEFAULT_RETENTION_POLICY = "rpTalaiot"

# camelCase option names used by Gradle-side configs, accepted alongside snake_case.
_ALIASES = {
    "dbName": "db_name",
    "taskMetricName": "task_metric_name",
    "buildMetricName": "build_metric_name",
    "publishTaskMetrics": "publish_task_metrics",
    "publishBuildMetrics": "publish_build_metrics",
    "retentionPolicy": "retention_policy",
    "timeoutMs": "timeout_ms",
}

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "db_name": {"type": "string"},
        "url": {"type": "string"},
        "username": {"type": "string"},
        "password": {"type": "string"},
        "task_metric_name": {"type": "string", "minLength": 1},
        "build_metric_name": {"type": "string", "minLength": 1},
        "publish_task_metrics": {"type": "boolean"},
        "publish_build_metrics": {"type": "boolean"},
        "retention_policy": {"type": "string", "minLength": 1},
        "timeout_ms": {"type": "integer", "minimum": 1},
    },
    "additionalProperties": False,
}


@dataclass
class InfluxDbPublisherConfiguration:
    db_name: str = ""
    url: str = ""
    username: str = ""
    password: str = ""
    task_metric_name: str = "task"
    build_metric_name: str = "build"
    publish_task_metrics: bool = True
    publish_build_metrics: bool = True
    retention_policy: str = DEFAULT_RETENTION_POLICY
    timeout_ms: int = 10_000

    @staticmethod
    def from_file(path: str) -> "InfluxDbPublisherConfiguration":
        ext = Path(path).suffix.lower()
        if ext not in {".yaml", ".yml", ".json"}:
            raise ConfigurationError(f"Unsupported configuration file extension: {ext}")
        try:
            with open(path, "r", encoding="utf-8") as handle:
                if ext == ".json":
                    data = json.load(handle)
                else:
                    data = yaml.safe_load(handle)
        except OSError as exc:
            raise ConfigurationError(f"Unable to read configuration {path}: {exc}") from exc
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Malformed configuration {path}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration {path} must be a mapping")
        # Host configs usually nest the publisher under its own key.
        if isinstance(data.get("influxDbPublisher"), dict):
            data = data["influxDbPublisher"]
        return InfluxDbPublisherConfiguration.from_mapping(data)

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> "InfluxDbPublisherConfiguration":
        """Build a configuration from plain data, validating types and keys.

        Args:
            data (Mapping[str, Any]): Options in snake_case or camelCase form.

        Returns:
            InfluxDbPublisherConfiguration: Configuration with defaults applied.

        Raises:
            ConfigurationError: If an option is unknown or has the wrong type.
        """
        normalized = {_ALIASES.get(key, key): value for key, value in data.items()}
        errors = sorted(Draft7Validator(CONFIG_SCHEMA).iter_errors(normalized), key=lambda err: list(err.path))
        if errors:
            details = "; ".join(_describe(err) for err in errors)
            raise ConfigurationError(f"Invalid publisher configuration: {details}")
        return InfluxDbPublisherConfiguration(**normalized)

    def validate(self) -> None:
        """Fail when the options needed to reach the store are missing.

        Raises:
            ConfigurationError: If ``db_name`` or ``url`` is empty.
        """
        missing = [name for name in ("db_name", "url") if not str(getattr(self, name) or "").strip()]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

    def snapshot(self) -> dict:
        return redact_data(
            {
                "db_name": self.db_name,
                "url": self.url,
                "username": self.username,
                "password": "[REDACTED]" if self.password else "",
                "task_metric_name": self.task_metric_name,
                "build_metric_name": self.build_metric_name,
                "publish_task_metrics": self.publish_task_metrics,
                "publish_build_metrics": self.publish_build_metrics,
                "retention_policy": self.retention_policy,
                "timeout_ms": self.timeout_ms,
            }
        )


def _describe(error) -> str:
    location = ".".join(str(part) for part in error.path)
    return f"{location}: {error.message}" if location else error.message
