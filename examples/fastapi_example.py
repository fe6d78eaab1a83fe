"""Example FastAPI application exposing the bridge control surface.

Run with:
    TASKBRIDGE_URL="http://localhost:8086/api/v2/write?org=me&bucket=tasks" \
    TASKBRIDGE_TOKEN=secret \
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    POST /messages        - control message, e.g. {"type": "PLUGIN_TEST_CONNECTION"}
    POST /events/{name}   - lifecycle event, e.g. /events/task-completed
                            with {"task": {...}}
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from taskbridge import BridgeConfig, InMemoryTaskHost, TaskBridge, configure_logging
from taskbridge.adapters.frameworks.fastapi import create_bridge_router

configure_logging()

# Stand-in host seeded from the environment; a real deployment wraps the
# productivity app's plugin API in its own TaskHostPort adapter.
host = InMemoryTaskHost(
    projects=[{"id": "inbox", "title": "Inbox"}],
    tags=[{"id": "focus", "title": "Deep Work"}],
    stored_config=BridgeConfig.from_env().to_json(),
)
bridge = TaskBridge(host)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Attach the bridge for the lifetime of the app."""
    async with bridge.attached():
        yield


app = FastAPI(title="Task Bridge", lifespan=lifespan)
app.include_router(create_bridge_router(bridge.dispatcher))


@app.get("/notifications")
async def notifications() -> list[dict[str, str]]:
    """Return notifications the bridge has shown so far."""
    return [
        {"message": n.message, "severity": n.severity.value}
        for n in host.notifications
    ]
