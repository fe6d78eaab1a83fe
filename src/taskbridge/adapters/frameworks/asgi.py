"""ASGI generic adapter for the bridge control surface.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency. A host UI posts control messages and lifecycle events to it.
"""

import json
from collections.abc import Callable, Coroutine
from typing import Any

from taskbridge.core.dispatcher import EventDispatcher

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

EVENTS_PREFIX = "/events/"
ACCEPTED_BODY = json.dumps({"status": "accepted"})


async def _read_body(receive: Receive) -> bytes:
    """Read the full request body from the ASGI receive channel."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def _parse_json(body: bytes) -> Any:
    """Decode a JSON request body, returning None if it is malformed."""
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _send_accepted(send: Send) -> None:
    await _send_response(send, 202, "application/json", ACCEPTED_BODY)


def create_asgi_app(dispatcher: EventDispatcher) -> ASGIApp:
    """Create an ASGI app with /messages and /events/{name} endpoints.

    ``POST /messages`` takes a control message (``{"type": ..., "config": ...}``)
    and returns once the action has finished and the user was notified.
    ``POST /events/{name}`` takes a lifecycle event payload and returns
    immediately; the export runs in the background. Malformed bodies are
    accepted and ignored.

    Args:
        dispatcher: Dispatcher that handles messages and events.

    Returns:
        ASGI application callable.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        path = scope["path"]
        is_known = path == "/messages" or (
            path.startswith(EVENTS_PREFIX) and len(path) > len(EVENTS_PREFIX)
        )
        if not is_known:
            await _send_response(send, 404, "text/plain", "Not Found")
            return
        if scope["method"] != "POST":
            await _send_response(send, 405, "text/plain", "Method Not Allowed")
            return

        payload = _parse_json(await _read_body(receive))
        if path == "/messages":
            await dispatcher.handle_message(payload)
        else:
            event_name = path[len(EVENTS_PREFIX) :]
            dispatcher.handle_event(
                event_name, payload if isinstance(payload, dict) else None
            )
        await _send_accepted(send)

    return app
