"""InfluxDB line protocol encoder for data points."""

import math
import re
import time
from collections.abc import Iterable, Mapping

from taskbridge.core.models import DataPoint

_SPECIAL_CHARS = re.compile(r"([ ,=])")


def _escape_key(value: object) -> str:
    """Escape a measurement, tag key, tag value, or field key.

    Every space, comma and equals sign gets a backslash in front of it.
    """
    return _SPECIAL_CHARS.sub(r"\\\1", _stringify(value))


def _stringify(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


def _format_field_value(value: object) -> str | None:
    """Format a field value, or return None if it cannot be represented."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return _format_number(value)
    # Backslashes before quotes, or the added backslashes get doubled.
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _encode_tags(tags: Mapping[str, object]) -> str:
    return ",".join(
        f"{_escape_key(key)}={_escape_key(value)}"
        for key, value in tags.items()
        if value is not None and value != ""
    )


def _encode_fields(fields: Mapping[str, object]) -> str:
    parts = []
    for key, value in fields.items():
        if value is None:
            continue
        formatted = _format_field_value(value)
        if formatted is None:
            continue
        parts.append(f"{_escape_key(key)}={formatted}")
    return ",".join(parts)


def encode_point(point: DataPoint) -> str:
    """Encode a data point as one line of line protocol.

    Args:
        point: The DataPoint to encode.

    Returns:
        A single line without trailing newline, in the shape
        ``measurement[,tags] fields timestamp``. Empty string if no field
        survives filtering; callers must drop such points.
    """
    fields = _encode_fields(point.fields)
    if not fields:
        return ""

    timestamp = point.timestamp_ms
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        timestamp = int(time.time() * 1000)

    tags = _encode_tags(point.tags)
    tag_part = f",{tags}" if tags else ""
    return f"{_escape_key(point.measurement)}{tag_part} {fields} {timestamp}"


def encode_lines(points: Iterable[DataPoint]) -> list[str]:
    """Encode data points, dropping those without encodable fields.

    Args:
        points: An iterable of DataPoint objects.

    Returns:
        One line per surviving point, in input order.
    """
    return [line for line in (encode_point(p) for p in points) if line]
