from __future__ import annotations

import math
from typing import Sequence

from influxdb_client import InfluxDBClient
from influxdb_client.client.write_api import SYNCHRONOUS
from influxdb_client.rest import ApiException
from urllib3.exceptions import HTTPError

from talaiot.core.errors import WriteError
from talaiot.core.models import FieldValue, Point
from talaiot.core.redaction import redact_text


# InfluxDB 1.8+ compatibility endpoints ignore the organization.
V1_ORG = "-"

_MEASUREMENT_ESCAPES = str.maketrans({",": r"\,", " ": r"\ "})
_KEY_ESCAPES = str.maketrans({",": r"\,", "=": r"\=", " ": r"\ "})


def to_line_protocol(point: Point) -> str:
    """Serialize a point to one line-protocol record in declared field order.

    No tags and no timestamp are written; the store assigns the time.

    Raises:
        ValueError: If the point has no fields or a value cannot be written.
    """
    if not point.fields:
        raise ValueError(f"{point.measurement} point has no fields")
    fields = ",".join(
        f"{key.translate(_KEY_ESCAPES)}={_format_value(key, value)}" for key, value in point.fields
    )
    return f"{point.measurement.translate(_MEASUREMENT_ESCAPES)} {fields}"


def _format_value(key: str, value: FieldValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Field {key} is not finite: {value!r}")
        return repr(number)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    raise ValueError(f"Field {key} has unsupported type {type(value).__name__}")


class InfluxDbStoreClient:
    """Write batches through the InfluxDB v2 client against a 1.x database.

    The database/retention-policy pair maps to the ``database/rp`` bucket name
    of the 1.8 compatibility API, and ``username:password`` becomes the token.
    Records are sent as line protocol built here so field order is preserved.
    """
    def __init__(
        self,
        url: str,
        username: str = "",
        password: str = "",
        timeout_ms: int = 10_000,
        client: InfluxDBClient | None = None,
    ) -> None:
        self.url = url
        token = f"{username}:{password}" if username or password else None
        self._client = client or InfluxDBClient(url=url, token=token, org=V1_ORG, timeout=timeout_ms)
        self._write_api = self._client.write_api(write_options=SYNCHRONOUS)

    def write(self, points: Sequence[Point], database: str, retention_policy: str) -> None:
        """Write the batch in one request.

        Raises:
            WriteError: On HTTP, connection or serialization failures. The
                message is redacted since client errors may echo credentials.
        """
        bucket = f"{database}/{retention_policy}"
        try:
            records = [to_line_protocol(point) for point in points]
            self._write_api.write(bucket=bucket, org=V1_ORG, record=records)
        except ApiException as exc:
            raise WriteError(
                redact_text(f"{bucket} rejected the write ({exc.status}): {exc.reason}")
            ) from exc
        except (HTTPError, OSError, ValueError) as exc:
            raise WriteError(redact_text(f"Unable to write to {self.url} ({bucket}): {exc}")) from exc

    def close(self) -> None:
        self._write_api.close()
        self._client.close()
