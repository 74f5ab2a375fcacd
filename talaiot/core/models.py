from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union


FieldValue = Union[float, bool, str]


class TaskMessageState(Enum):
    """Execution outcome reported for a single task."""
    EXECUTED = "EXECUTED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"
    UP_TO_DATE = "UP_TO_DATE"
    FROM_CACHE = "FROM_CACHE"
    NO_SOURCE = "NO_SOURCE"


@dataclass(frozen=True)
class TaskLength:
    """Timing record for one task of the build."""
    ms: float
    task_name: str
    task_path: str
    state: TaskMessageState
    root_node: bool
    module: str
    task_dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class CustomProperties:
    """Caller-defined metrics merged into the task and build points."""
    task_properties: Mapping[str, str] = field(default_factory=dict)
    build_properties: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Switches:
    daemon: str | None = None
    offline: str | None = None
    parallel: str | None = None
    configure_on_demand: str | None = None
    continue_on_failure: str | None = None
    dry_run: str | None = None
    build_cache: str | None = None
    refresh_dependencies: str | None = None
    rerun_tasks: str | None = None


@dataclass(frozen=True)
class Environment:
    """Descriptive facts about the machine and tool that ran the build."""
    cpu_count: str | None = None
    os_version: str | None = None
    max_workers: str | None = None
    java_runtime: str | None = None
    locale: str | None = None
    username: str | None = None
    public_ip: str | None = None
    default_charset: str | None = None
    ide_version: str | None = None
    gradle_version: str | None = None
    cache_mode: str | None = None
    cache_push_enabled: str | None = None
    cache_url: str | None = None
    cache_hit: str | None = None
    cache_miss: str | None = None
    cache_store: str | None = None
    git_branch: str | None = None
    git_user: str | None = None
    switches: Switches = field(default_factory=Switches)
    hostname: str | None = None
    os_manufacturer: str | None = None


@dataclass(frozen=True)
class ExecutionReport:
    """Outcome of one build, produced once and published once."""
    duration_ms: str | None
    success: bool
    custom_properties: CustomProperties = field(default_factory=CustomProperties)
    tasks: tuple[TaskLength, ...] = ()
    configuration_duration_ms: str | None = None
    environment: Environment | None = None
    build_id: str | None = None
    build_invocation_id: str | None = None
    begin_ms: str | None = None
    end_ms: str | None = None


@dataclass(frozen=True)
class Point:
    """One record for a measurement; the store assigns the timestamp on write."""
    measurement: str
    fields: tuple[tuple[str, FieldValue], ...]

    def field_names(self) -> list[str]:
        return [key for key, _ in self.fields]

    def field_values(self) -> list[FieldValue]:
        return [value for _, value in self.fields]


@dataclass(frozen=True)
class WriteTarget:
    database: str
    retention_policy: str
