"""Routing of host lifecycle events and UI control messages.

Background sync (lifecycle events) never surfaces errors to the user.
Every interactive action (save, test, import) ends with exactly one
success or failure notification.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from taskbridge.core.config import BridgeConfig
from taskbridge.core.enrich import enrich_task, heartbeat_point
from taskbridge.core.errors import BridgeError
from taskbridge.core.metadata import MetadataCache
from taskbridge.core.models import LifecycleEvent, Severity
from taskbridge.core.ports import DeliveryPort, HookHandler, TaskHostPort, TaskRecord
from taskbridge.core.scheduling import BackgroundTasks, Debouncer

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 5.0
DEFAULT_BATCH_SIZE = 50

MSG_SAVE_CONFIG = "PLUGIN_SAVE_CONFIG"
MSG_TEST_CONNECTION = "PLUGIN_TEST_CONNECTION"
MSG_IMPORT_HISTORY = "PLUGIN_IMPORT_HISTORY"


@dataclass
class BridgeState:
    """Shared mutable state, owned by the bridge and passed to components.

    The config is replaced as a whole on save, never edited in place.
    """

    config: BridgeConfig
    cache: MetadataCache


def _task_from(payload: Mapping[str, Any], key: str) -> TaskRecord | None:
    task = payload.get(key) if isinstance(payload, Mapping) else None
    return task if isinstance(task, Mapping) else None


def _chunks(items: Sequence[TaskRecord], size: int) -> list[Sequence[TaskRecord]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class EventDispatcher:
    """Routes lifecycle events and control messages to the export pipeline.

    Args:
        host: Host application port.
        client: Delivery client for the time-series endpoint.
        state: Shared config and metadata cache.
        debounce_seconds: Quiet period before a task update is sent.
        batch_size: Tasks per write request during a bulk import.
    """

    def __init__(
        self,
        host: TaskHostPort,
        client: DeliveryPort,
        state: BridgeState,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self._host = host
        self._client = client
        self._state = state
        self._batch_size = batch_size
        self._background = BackgroundTasks()
        self._debouncer = Debouncer(
            debounce_seconds,
            self._background,
            description="Debounced synchronization error",
        )

    @property
    def state(self) -> BridgeState:
        return self._state

    @property
    def update_pending(self) -> bool:
        """True while a debounced task update is waiting to fire."""
        return self._debouncer.pending

    # --- Lifecycle events (background sync) ---

    async def sync_task(self, task: TaskRecord) -> int:
        """Enrich one task and send it with the active config."""
        state = self._state
        point = enrich_task(task, state.config, state.cache)
        return await self._client.send(point, state.config)

    def on_task_completed(self, payload: Mapping[str, Any]) -> None:
        task = _task_from(payload, "task")
        if task is None:
            return
        logger.info("Task completed", extra={"task_id": str(task.get("id"))})
        self._background.spawn(self.sync_task(task), "Real-time synchronization error")

    def on_current_task_changed(self, payload: Mapping[str, Any]) -> None:
        task = _task_from(payload, "current")
        if task is None:
            return
        logger.info("Current task changed", extra={"task_id": str(task.get("id"))})
        self._background.spawn(self.sync_task(task), "Real-time synchronization error")

    def on_task_updated(self, payload: Mapping[str, Any]) -> None:
        """Debounce updates: only the last one in a quiet window is sent."""
        task = _task_from(payload, "task")
        if task is None:
            return
        self._debouncer.submit(lambda: self.sync_task(task))

    def on_task_deleted(self, payload: Mapping[str, Any]) -> None:
        # Deletions have no representation in the time series; see DESIGN.md.
        task_id = payload.get("taskId") if isinstance(payload, Mapping) else None
        logger.info("Task deleted, nothing exported", extra={"task_id": str(task_id)})

    def on_day_finished(self, payload: Mapping[str, Any]) -> None:
        logger.info("Day finished")
        self._background.spawn(
            self._host.notify(
                "Day concluded. Synchronizing final state.", Severity.INFO
            ),
            "Failed to show day-finished notification",
        )

    def handle_event(self, name: str, payload: Mapping[str, Any] | None = None) -> None:
        """Route a lifecycle event by name. Unknown names are ignored."""
        try:
            event = LifecycleEvent(name)
        except ValueError:
            logger.debug("Ignoring unknown lifecycle event %r", name)
            return
        self.handler_for(event)(payload or {})

    def handler_for(self, event: LifecycleEvent) -> HookHandler:
        """Return the handler registered with the host for event."""
        return {
            LifecycleEvent.TASK_COMPLETED: self.on_task_completed,
            LifecycleEvent.CURRENT_TASK_CHANGED: self.on_current_task_changed,
            LifecycleEvent.TASK_UPDATED: self.on_task_updated,
            LifecycleEvent.TASK_DELETED: self.on_task_deleted,
            LifecycleEvent.DAY_FINISHED: self.on_day_finished,
        }[event]

    # --- Control messages (interactive) ---

    async def save_config(self, config: BridgeConfig) -> bool:
        """Activate config and persist it through the host."""
        self._state.config = config
        try:
            await self._host.persist_config(config.to_json())
        except Exception as exc:
            logger.exception("Failed to persist config")
            await self._host.notify(
                f"Failed to persist configuration: {exc}", Severity.ERROR
            )
            return False
        logger.info("Configuration saved by user")
        await self._host.notify("Configuration persisted.", Severity.SUCCESS)
        return True

    async def test_connection(self, config: BridgeConfig | None = None) -> None:
        """Send a heartbeat point to validate connectivity.

        Args:
            config: Unsaved settings to test. Defaults to the active config.

        Raises:
            ConfigurationError: URL or token missing. Nothing is sent.
            DeliveryError: The heartbeat write failed.
        """
        config = config or self._state.config
        await self._client.send(heartbeat_point(config), config, explicit=True)
        logger.info("Connection test passed")

    async def _notify_test_connection(self, config: BridgeConfig | None) -> bool:
        try:
            await self.test_connection(config)
        except BridgeError as exc:
            logger.error("Connection test failed: %s", exc)
            await self._host.notify(f"Connection failed: {exc}", Severity.ERROR)
            return False
        except Exception as exc:
            logger.exception("Connection test failed")
            await self._host.notify(f"Connection failed: {exc}", Severity.ERROR)
            return False
        await self._host.notify("Connection verified successfully.", Severity.SUCCESS)
        return True

    async def import_history(self) -> int:
        """Export every archived and active task in sequential batches.

        Returns:
            Number of tasks exported.

        Raises:
            Exception: The first failure aborts the remaining batches.
        """
        await self._state.cache.refresh()
        archived, active = await asyncio.gather(
            self._host.fetch_archived_tasks(),
            self._host.fetch_active_tasks(),
        )
        tasks = [*archived, *active]
        for number, batch in enumerate(_chunks(tasks, self._batch_size), start=1):
            config = self._state.config
            points = [enrich_task(task, config, self._state.cache) for task in batch]
            logger.info(
                "Sending import batch", extra={"batch": number, "size": len(batch)}
            )
            await self._client.send(points, config, explicit=True)
        return len(tasks)

    async def _notify_import_history(self) -> bool:
        logger.info("Initiating global historical import")
        await self._host.notify("Initiating global historical import...", Severity.INFO)
        try:
            count = await self.import_history()
        except Exception as exc:
            logger.exception("Bulk transfer failed")
            await self._host.notify(f"Bulk transfer failed: {exc}", Severity.ERROR)
            return False
        await self._host.notify(
            f"Successfully exported {count} items.", Severity.SUCCESS
        )
        return True

    async def handle_message(self, message: Any) -> None:
        """Handle a control message from the UI.

        Messages look like ``{"type": "PLUGIN_...", "config": {...}}``.
        Malformed or unknown messages are ignored.
        """
        if not isinstance(message, Mapping):
            return
        msg_type = message.get("type")
        if not isinstance(msg_type, str):
            return
        msg_type = msg_type.strip()
        raw_config = message.get("config")
        if not isinstance(raw_config, Mapping):
            raw_config = None

        if msg_type == MSG_SAVE_CONFIG:
            if raw_config is not None:
                await self.save_config(BridgeConfig.from_mapping(raw_config))
        elif msg_type == MSG_TEST_CONNECTION:
            override = None
            if raw_config is not None:
                candidate = BridgeConfig.from_mapping(raw_config)
                if candidate.endpoint_url:
                    override = candidate
            await self._notify_test_connection(override)
        elif msg_type == MSG_IMPORT_HISTORY:
            await self._notify_import_history()
        else:
            logger.debug("Ignoring unknown message type %r", msg_type)

    # --- Shutdown ---

    def close(self) -> None:
        """Cancel a pending debounced update."""
        self._debouncer.cancel()

    async def drain(self) -> None:
        """Wait for in-flight background sends to finish."""
        await self._background.drain()
