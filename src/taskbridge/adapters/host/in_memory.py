"""In-memory host adapter.

Implements TaskHostPort with plain lists and dicts. Suitable for testing,
for local replay of exported task dumps, and as the reference for writing
an adapter around a real plugin API.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from taskbridge.core.models import LifecycleEvent, Severity
from taskbridge.core.ports import HookHandler, TaskRecord, Unregister


@dataclass(frozen=True)
class Notification:
    """A notification shown to the user."""

    message: str
    severity: Severity


class InMemoryTaskHost:
    """In-memory implementation of TaskHostPort.

    Args:
        projects: Project mappings with id and title.
        tags: Tag mappings with id and title.
        active_tasks: Tasks returned by fetch_active_tasks().
        archived_tasks: Tasks returned by fetch_archived_tasks().
        stored_config: Serialized config returned by load_config().
    """

    def __init__(
        self,
        projects: Sequence[Mapping[str, Any]] = (),
        tags: Sequence[Mapping[str, Any]] = (),
        active_tasks: Sequence[TaskRecord] = (),
        archived_tasks: Sequence[TaskRecord] = (),
        stored_config: str | None = None,
    ) -> None:
        self.projects = list(projects)
        self.tags = list(tags)
        self.active_tasks = list(active_tasks)
        self.archived_tasks = list(archived_tasks)
        self.stored_config = stored_config
        self.notifications: list[Notification] = []
        self._hooks: dict[LifecycleEvent, list[HookHandler]] = {}
        self._entry_points: dict[str, Callable[[], Mapping[str, Any]]] = {}

    async def fetch_projects(self) -> list[Mapping[str, Any]]:
        return list(self.projects)

    async def fetch_tags(self) -> list[Mapping[str, Any]]:
        return list(self.tags)

    async def fetch_active_tasks(self) -> list[TaskRecord]:
        return list(self.active_tasks)

    async def fetch_archived_tasks(self) -> list[TaskRecord]:
        return list(self.archived_tasks)

    async def persist_config(self, data: str) -> None:
        self.stored_config = data

    async def load_config(self) -> str | None:
        return self.stored_config

    async def notify(self, message: str, severity: Severity) -> None:
        self.notifications.append(Notification(message, severity))

    def register_hook(self, event: LifecycleEvent, handler: HookHandler) -> Unregister:
        handlers = self._hooks.setdefault(event, [])
        handlers.append(handler)

        def unregister() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unregister

    def register_entry_point(
        self, label: str, on_open: Callable[[], Mapping[str, Any]]
    ) -> Unregister:
        self._entry_points[label] = on_open

        def unregister() -> None:
            self._entry_points.pop(label, None)

        return unregister

    # --- Host-side simulation ---

    def hook_count(self, event: LifecycleEvent) -> int:
        """Return the number of handlers subscribed to event."""
        return len(self._hooks.get(event, []))

    @property
    def entry_points(self) -> list[str]:
        return list(self._entry_points)

    def open_entry_point(self, label: str) -> Mapping[str, Any]:
        """Simulate the user opening a UI entry point."""
        return self._entry_points[label]()

    def emit(self, event: LifecycleEvent, payload: Mapping[str, Any] | None = None) -> None:
        """Deliver a lifecycle event to every subscribed handler."""
        for handler in list(self._hooks.get(event, [])):
            handler(payload or {})
