"""Background task helpers: best-effort execution and single-slot debounce."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

logger = logging.getLogger(__name__)

CoroutineFactory = Callable[[], Coroutine[Any, Any, Any]]


async def best_effort(operation: Awaitable[Any], description: str) -> None:
    """Await an operation and log any failure instead of raising it.

    This is the failure policy for background sync: errors are recorded
    in the log and never reach the event source or the user.

    Args:
        operation: Awaitable to run.
        description: Log message prefix used if the operation fails.
    """
    try:
        await operation
    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception(description)


class BackgroundTasks:
    """Tracks fire-and-forget tasks so they can be drained on shutdown."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, operation: Awaitable[Any], description: str) -> asyncio.Task[None]:
        """Run operation in the background under the best-effort policy."""
        task = asyncio.ensure_future(best_effort(operation, description))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait until every spawned task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class Debouncer:
    """Single-slot delayed work scheduler.

    Submitting new work cancels the pending work, if it has not fired yet,
    and restarts the delay. Work that has already fired runs to completion.

    Args:
        delay: Quiet period in seconds before the latest work fires.
        tasks: Tracker that runs the work once it fires.
        description: Log message prefix used if the work fails.
    """

    def __init__(
        self,
        delay: float,
        tasks: BackgroundTasks,
        description: str = "Debounced operation failed",
    ) -> None:
        self.delay = delay
        self._tasks = tasks
        self._description = description
        self._pending: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def submit(self, factory: CoroutineFactory) -> None:
        """Schedule factory() to run after the delay, replacing pending work."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self.delay, self._fire, factory)

    def cancel(self) -> None:
        """Drop pending work without running it."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self, factory: CoroutineFactory) -> None:
        self._pending = None
        self._tasks.spawn(factory(), self._description)
