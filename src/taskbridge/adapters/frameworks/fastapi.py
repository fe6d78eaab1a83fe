"""FastAPI adapter for the bridge control surface."""

from typing import Any

from fastapi import APIRouter, Request

from taskbridge.core.dispatcher import EventDispatcher


async def _json_or_none(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


def create_bridge_router(dispatcher: EventDispatcher) -> APIRouter:
    """Create a FastAPI router with /messages and /events/{name} endpoints.

    Args:
        dispatcher: Dispatcher that handles messages and events.

    Returns:
        APIRouter with the control endpoints configured.
    """
    router = APIRouter()

    @router.post("/messages", status_code=202)
    async def post_message(request: Request) -> dict[str, str]:
        """Run a control message (save config, test connection, import)."""
        await dispatcher.handle_message(await _json_or_none(request))
        return {"status": "accepted"}

    @router.post("/events/{name}", status_code=202)
    async def post_event(name: str, request: Request) -> dict[str, str]:
        """Deliver a lifecycle event; the export runs in the background."""
        payload = await _json_or_none(request)
        dispatcher.handle_event(name, payload if isinstance(payload, dict) else None)
        return {"status": "accepted"}

    return router
