"""Task enrichment: raw host task records to data points.

Enrichment is total. Missing or malformed task fields fall back to fixed
defaults, so every task produces a point.
"""

import math
import time
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from taskbridge.core.config import DEFAULT_MEASUREMENT, BridgeConfig
from taskbridge.core.metadata import MetadataCache
from taskbridge.core.models import DataPoint

DEFAULT_CONTEXT = "Default"
UNKNOWN_TASK_ID = "unknown"
UNTITLED = "Untitled"

# Canonical key first, then the name the host application uses.
_TIME_SPENT_KEYS = ("timeSpentMs", "timeSpent")
_TIME_ESTIMATE_KEYS = ("timeEstimateMs", "timeEstimate")
_UPDATED_KEYS = ("updatedAt", "updated")
_CREATED_KEYS = ("createdAt", "created")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _first(task: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if task.get(key) is not None:
            return task[key]
    return None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int beyond float range
        return False


def _parse_timestamp_ms(value: Any) -> int | None:
    """Parse epoch milliseconds, an ISO-8601 string, or a datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        try:
            return int(value.timestamp() * 1000)
        except (OverflowError, ValueError):
            return None
    if _is_number(value):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            try:
                return int(text)
            except ValueError:
                return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        return _parse_timestamp_ms(parsed)
    return None


def _task_timestamp_ms(task: Mapping[str, Any], now_ms: int) -> int:
    raw = _first(task, _UPDATED_KEYS) or _first(task, _CREATED_KEYS)
    if not raw:
        return now_ms
    parsed = _parse_timestamp_ms(raw)
    return now_ms if parsed is None else parsed


def _first_tag_name(task: Mapping[str, Any], cache: MetadataCache) -> str:
    tag_ids = task.get("tagIds")
    if isinstance(tag_ids, str) or not isinstance(tag_ids, Sequence) or not tag_ids:
        return DEFAULT_CONTEXT
    return cache.lookup_tag_name(tag_ids[0]) or DEFAULT_CONTEXT


def _measurement(config: BridgeConfig) -> str:
    return config.measurement_name or DEFAULT_MEASUREMENT


def enrich_task(
    task: Mapping[str, Any],
    config: BridgeConfig,
    cache: MetadataCache,
    now_ms: int | None = None,
) -> DataPoint:
    """Map a raw task record to a data point.

    Only the first tag of a multi-tag task is exported as the context tag.

    Args:
        task: Task record from the host. Any key may be missing.
        config: Supplies the measurement name.
        cache: Resolves project and tag ids to names.
        now_ms: Fallback timestamp (default: current time).

    Returns:
        DataPoint with project/context/task_id/is_done tags and
        duration_ms/title/estimate_ms/efficiency_ratio fields.
    """
    if now_ms is None:
        now_ms = _now_ms()

    spent = _first(task, _TIME_SPENT_KEYS)
    estimate = _first(task, _TIME_ESTIMATE_KEYS)
    spent_is_number = _is_number(spent)
    estimate_is_number = _is_number(estimate)

    efficiency: int | float = 1
    if estimate_is_number and estimate > 0 and spent_is_number:
        ratio = spent / estimate
        if math.isfinite(ratio):
            efficiency = ratio

    task_id = task.get("id")
    title = task.get("title")
    return DataPoint(
        measurement=_measurement(config),
        tags={
            "project": cache.lookup_project_name(task.get("projectId")),
            "context": _first_tag_name(task, cache),
            "task_id": str(task_id) if task_id else UNKNOWN_TASK_ID,
            "is_done": "true" if task.get("isDone") else "false",
        },
        fields={
            "duration_ms": spent if spent_is_number else 0,
            "title": str(title) if title else UNTITLED,
            "estimate_ms": estimate if estimate_is_number else 0,
            "efficiency_ratio": efficiency,
        },
        timestamp_ms=_task_timestamp_ms(task, now_ms),
    )


def heartbeat_point(config: BridgeConfig, now_ms: int | None = None) -> DataPoint:
    """Create a synthetic point used only to validate connectivity."""
    return DataPoint(
        measurement=_measurement(config),
        tags={"service": "bridge", "type": "heartbeat"},
        fields={"status": 1},
        timestamp_ms=_now_ms() if now_ms is None else now_ms,
    )
