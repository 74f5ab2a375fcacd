from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from talaiot.core.models import (
    CustomProperties,
    Environment,
    ExecutionReport,
    Switches,
    TaskLength,
    TaskMessageState,
)


logger = logging.getLogger(__name__)


_ENVIRONMENT_KEYS = {
    "cpuCount": "cpu_count",
    "osVersion": "os_version",
    "maxWorkers": "max_workers",
    "javaRuntime": "java_runtime",
    "locale": "locale",
    "username": "username",
    "publicIp": "public_ip",
    "defaultChartset": "default_charset",
    "ideVersion": "ide_version",
    "gradleVersion": "gradle_version",
    "cacheMode": "cache_mode",
    "cachePushEnabled": "cache_push_enabled",
    "cacheUrl": "cache_url",
    "cacheHit": "cache_hit",
    "cacheMiss": "cache_miss",
    "cacheStore": "cache_store",
    "gitBranch": "git_branch",
    "gitUser": "git_user",
    "hostname": "hostname",
    "osManufacturer": "os_manufacturer",
}

_SWITCH_KEYS = {
    "daemon": "daemon",
    "offline": "offline",
    "parallel": "parallel",
    "configureOnDemand": "configure_on_demand",
    "continueOnFailure": "continue_on_failure",
    "dryRun": "dry_run",
    "buildCache": "build_cache",
    "refreshDependencies": "refresh_dependencies",
    "rerunTasks": "rerun_tasks",
}


def load_report(path: str) -> ExecutionReport:
    """Load an execution report written as JSON by the build instrumentation.

    Raises:
        FileNotFoundError: If the report does not exist.
        ValueError: If the document is not a valid report (includes
            ``json.JSONDecodeError``).
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return report_from_dict(data)


def report_from_dict(data: dict[str, Any]) -> ExecutionReport:
    if not isinstance(data, dict):
        raise ValueError("Execution report must be a JSON object")
    custom = data.get("customProperties") or {}
    tasks = _tasks_from_list(data.get("tasks") or [])
    environment = data.get("environment")
    return ExecutionReport(
        duration_ms=_optional_str(data.get("durationMs")),
        success=_parse_bool(data.get("success"), "success"),
        configuration_duration_ms=_optional_str(data.get("configurationDurationMs")),
        custom_properties=CustomProperties(
            task_properties=_str_map(custom.get("taskProperties")),
            build_properties=_str_map(custom.get("buildProperties")),
        ),
        tasks=tasks,
        environment=_environment_from_dict(environment) if isinstance(environment, dict) else None,
        build_id=_optional_str(data.get("buildId")),
        build_invocation_id=_optional_str(data.get("buildInvocationId")),
        begin_ms=_optional_str(data.get("beginMs")),
        end_ms=_optional_str(data.get("endMs")),
    )


def _tasks_from_list(items: list[Any]) -> tuple[TaskLength, ...]:
    """Convert task entries, dropping the ones that cannot be read.

    A bad entry is logged and skipped so the rest of the report still loads.
    """
    if not isinstance(items, list):
        raise ValueError("tasks must be a JSON array")
    tasks = []
    for index, item in enumerate(items):
        try:
            tasks.append(_task_from_dict(item))
        except ValueError as exc:
            logger.warning("Dropping task entry %d: %s", index, exc)
    return tuple(tasks)


def _task_from_dict(item: dict[str, Any]) -> TaskLength:
    if not isinstance(item, dict):
        raise ValueError("task entries must be JSON objects")
    state = str(item.get("state", "")).upper()
    try:
        task_state = TaskMessageState[state]
    except KeyError as exc:
        raise ValueError(f"task {item.get('taskPath')} has unknown state {item.get('state')!r}") from exc
    return TaskLength(
        ms=item.get("ms", 0),
        task_name=str(item.get("taskName", "")),
        task_path=str(item.get("taskPath", "")),
        state=task_state,
        root_node=_parse_bool(item.get("rootNode"), "rootNode"),
        module=str(item.get("module", "")),
        task_dependencies=tuple(str(dep) for dep in item.get("taskDependencies") or []),
    )


def _environment_from_dict(data: dict[str, Any]) -> Environment:
    values = {attr: _optional_str(data.get(key)) for key, attr in _ENVIRONMENT_KEYS.items()}
    switches = data.get("switches") or {}
    return Environment(
        switches=Switches(**{attr: _optional_str(switches.get(key)) for key, attr in _SWITCH_KEYS.items()}),
        **values,
    )


def _str_map(value: Any) -> dict[str, str]:
    if not value:
        return {}
    if not isinstance(value, dict):
        raise ValueError("Custom properties must be JSON objects")
    return {str(key): str(val) for key, val in value.items()}


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _parse_bool(value: Any, field: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValueError(f"{field} must be a boolean, got {value!r}")
