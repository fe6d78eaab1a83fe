"""Core domain models for task export data."""

from dataclasses import dataclass, field
from enum import Enum

FieldValue = int | float | bool | str


@dataclass(frozen=True)
class DataPoint:
    """A single time-series point, ready for line protocol encoding.

    Attributes:
        measurement: Measurement name (e.g., tasks). Must not be empty.
        tags: Indexed dimensions, rendered in insertion order.
        fields: Measured values. A point with no encodable fields is dropped.
        timestamp_ms: Unix timestamp in milliseconds.
    """

    measurement: str
    tags: dict[str, str] = field(default_factory=dict)
    fields: dict[str, FieldValue] = field(default_factory=dict)
    timestamp_ms: int = 0

    def __post_init__(self) -> None:
        if not self.measurement:
            raise ValueError("DataPoint measurement must not be empty")


class Severity(str, Enum):
    """Level of a user-visible notification."""

    SUCCESS = "SUCCESS"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LifecycleEvent(str, Enum):
    """Task lifecycle events emitted by the host application."""

    TASK_COMPLETED = "task-completed"
    CURRENT_TASK_CHANGED = "current-task-changed"
    TASK_UPDATED = "task-updated"
    TASK_DELETED = "task-deleted"
    DAY_FINISHED = "day-finished"
