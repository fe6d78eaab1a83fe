"""Integration tests for the FastAPI control router."""

import pytest
from fastapi import FastAPI

from taskbridge.adapters.frameworks.fastapi import create_bridge_router
from taskbridge.adapters.host.in_memory import InMemoryTaskHost
from taskbridge.core.dispatcher import EventDispatcher
from taskbridge.core.models import Severity
from tests.fakes import FakeDeliveryClient

pytestmark = [pytest.mark.asgi, pytest.mark.tier(2)]


@pytest.fixture
def app(dispatcher: EventDispatcher) -> FastAPI:
    app = FastAPI()
    app.include_router(create_bridge_router(dispatcher), prefix="/bridge")
    return app


class TestBridgeRouter:
    """Tests for the router returned by create_bridge_router()."""

    async def test_save_config_message(
        self,
        app: FastAPI,
        dispatcher: EventDispatcher,
        host: InMemoryTaskHost,
        asgi_test_client,
    ) -> None:
        async with asgi_test_client(app) as client:
            response = await client.post(
                "/bridge/messages",
                json={
                    "type": "PLUGIN_SAVE_CONFIG",
                    "config": {"endpointUrl": "http://new", "authToken": "t"},
                },
            )

        assert response.status_code == 202
        assert response.json() == {"status": "accepted"}
        assert dispatcher.state.config.endpoint_url == "http://new"
        assert host.notifications[-1].severity is Severity.SUCCESS

    async def test_event_route(
        self,
        app: FastAPI,
        dispatcher: EventDispatcher,
        fake_client: FakeDeliveryClient,
        asgi_test_client,
    ) -> None:
        async with asgi_test_client(app) as client:
            response = await client.post(
                "/bridge/events/current-task-changed",
                json={"current": {"id": "t7"}},
            )
        await dispatcher.drain()

        assert response.status_code == 202
        assert fake_client.sent[0].points[0].tags["task_id"] == "t7"

    async def test_malformed_body_is_ignored(
        self,
        app: FastAPI,
        host: InMemoryTaskHost,
        asgi_test_client,
    ) -> None:
        async with asgi_test_client(app) as client:
            response = await client.post("/bridge/messages", content=b"[oops")

        assert response.status_code == 202
        assert host.notifications == []
