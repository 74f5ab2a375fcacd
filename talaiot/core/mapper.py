from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping

from talaiot.core.errors import MappingError
from talaiot.core.models import ExecutionReport, FieldValue, Point, TaskLength


logger = logging.getLogger(__name__)


def parse_duration(value: object, field: str, measurement: str | None = None) -> float:
    """Parse a textual or numeric duration into a float.

    Args:
        value (object): Raw value from the report (usually a numeric string).
        field (str): Field name, used in the error message.
        measurement (str | None): Measurement the value belongs to.

    Returns:
        float: Parsed value.

    Raises:
        MappingError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise MappingError(f"{field} must be numeric, got boolean", measurement, field)
    try:
        parsed = float(value.strip() if isinstance(value, str) else value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise MappingError(f"{field} is not numeric: {value!r}", measurement, field) from exc
    if not math.isfinite(parsed):
        raise MappingError(f"{field} is not finite: {value!r}", measurement, field)
    return parsed


def map_task_point(task: TaskLength, task_properties: Mapping[str, str], measurement: str) -> Point:
    """Map one task record to a point; built-in fields come first."""
    fields: list[tuple[str, FieldValue]] = [
        ("value", parse_duration(task.ms, "value", measurement)),
        ("state", task.state.name),
        ("module", task.module),
        ("rootNode", bool(task.root_node)),
        ("task", task.task_path),
    ]
    fields.extend(task_properties.items())
    return Point(measurement=measurement, fields=tuple(fields))


def map_task_points(
    tasks: Iterable[TaskLength],
    task_properties: Mapping[str, str],
    measurement: str,
) -> list[Point]:
    """Map every task record to a point.

    Args:
        tasks (Iterable[TaskLength]): Task records in report order.
        task_properties (Mapping[str, str]): Custom fields appended to each point.
        measurement (str): Measurement name for the task series.

    Returns:
        list[Point]: One point per mappable record, in input order.

    Notes:
        A record that fails to map is logged and dropped; the remaining
        records are still mapped.
    """
    points: list[Point] = []
    for task in tasks:
        try:
            points.append(map_task_point(task, task_properties, measurement))
        except MappingError as exc:
            logger.warning(
                "Dropping %s point for task %s: %s",
                measurement,
                task.task_path,
                exc,
            )
    return points


def map_build_point(
    report: ExecutionReport,
    build_properties: Mapping[str, str],
    measurement: str,
) -> Point:
    """Map the build-level outcome to a single point.

    Custom build fields sit between ``duration`` and ``success``; ``success``
    is always the last field.

    Raises:
        MappingError: If either duration is not numeric.
    """
    configuration = report.configuration_duration_ms
    if configuration is None or (isinstance(configuration, str) and not configuration.strip()):
        configuration_value = 0.0
    else:
        configuration_value = parse_duration(configuration, "configuration", measurement)

    fields: list[tuple[str, FieldValue]] = [
        ("configuration", configuration_value),
        ("duration", parse_duration(report.duration_ms, "duration", measurement)),
    ]
    fields.extend(build_properties.items())
    fields.append(("success", bool(report.success)))
    return Point(measurement=measurement, fields=tuple(fields))
