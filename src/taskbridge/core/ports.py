"""Port interfaces for the host application and the delivery transport.

The core depends only on these protocols, never on a concrete host or
HTTP client. Every data operation is awaitable.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from taskbridge.core.config import BridgeConfig
from taskbridge.core.models import DataPoint, LifecycleEvent, Severity

TaskRecord = Mapping[str, Any]
HookHandler = Callable[[Mapping[str, Any]], None]
Unregister = Callable[[], None]


@runtime_checkable
class TaskHostPort(Protocol):
    """Capabilities the bridge consumes from its host.

    Examples: InMemoryTaskHost, or an adapter around a plugin API.
    """

    async def fetch_projects(self) -> Sequence[Mapping[str, Any]]:
        """Return all projects as mappings with at least id and title."""
        ...

    async def fetch_tags(self) -> Sequence[Mapping[str, Any]]:
        """Return all tags as mappings with at least id and title."""
        ...

    async def fetch_active_tasks(self) -> Sequence[TaskRecord]:
        """Return tasks that are not archived."""
        ...

    async def fetch_archived_tasks(self) -> Sequence[TaskRecord]:
        """Return archived tasks."""
        ...

    async def persist_config(self, data: str) -> None:
        """Persist the serialized configuration."""
        ...

    async def load_config(self) -> str | None:
        """Return the serialized configuration, or None if never saved."""
        ...

    async def notify(self, message: str, severity: Severity) -> None:
        """Show a notification to the user."""
        ...

    def register_hook(self, event: LifecycleEvent, handler: HookHandler) -> Unregister:
        """Subscribe to a lifecycle event.

        Returns:
            Callable that removes the subscription.
        """
        ...

    def register_entry_point(
        self, label: str, on_open: Callable[[], Mapping[str, Any]]
    ) -> Unregister:
        """Add a UI entry point whose view is seeded by on_open().

        Returns:
            Callable that removes the entry point.
        """
        ...


@runtime_checkable
class DeliveryPort(Protocol):
    """Port for writing data points to the time-series endpoint.

    Examples: InfluxLineClient.
    """

    async def send(
        self,
        points: DataPoint | Iterable[DataPoint],
        config: BridgeConfig,
        *,
        explicit: bool = False,
    ) -> int:
        """Write points, returning the number of lines sent."""
        ...
