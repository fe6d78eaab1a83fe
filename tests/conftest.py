"""Shared test fixtures for all test modules."""

from collections.abc import Callable

import httpx
import pytest

from taskbridge.adapters.host.in_memory import InMemoryTaskHost
from taskbridge.adapters.transport.influx import InfluxLineClient
from taskbridge.core.config import BridgeConfig
from taskbridge.core.dispatcher import BridgeState, EventDispatcher
from taskbridge.core.metadata import MetadataCache
from tests.fakes import FakeDeliveryClient

WRITE_URL = "http://influx.test/api/v2/write?org=me&bucket=tasks"


@pytest.fixture
def config() -> BridgeConfig:
    """A complete configuration pointing at a fake endpoint."""
    return BridgeConfig(endpoint_url=WRITE_URL, auth_token="secret-token")


@pytest.fixture
def host() -> InMemoryTaskHost:
    """Host with one project and one tag."""
    return InMemoryTaskHost(
        projects=[{"id": "p1", "title": "Alpha"}],
        tags=[{"id": "g1", "title": "Deep Work"}],
    )


@pytest.fixture
async def cache(host: InMemoryTaskHost) -> MetadataCache:
    """Metadata cache already refreshed from the host fixture."""
    cache = MetadataCache(host)
    await cache.refresh()
    return cache


@pytest.fixture
def example_task() -> dict[str, object]:
    return {
        "id": "t1",
        "title": "Write report",
        "projectId": "p1",
        "tagIds": ["g1"],
        "isDone": True,
        "timeSpentMs": 3600000,
        "timeEstimateMs": 1800000,
        "updatedAt": 1700000000000,
    }


@pytest.fixture
def fake_client() -> FakeDeliveryClient:
    return FakeDeliveryClient()


@pytest.fixture
async def dispatcher(
    host: InMemoryTaskHost,
    cache: MetadataCache,
    config: BridgeConfig,
    fake_client: FakeDeliveryClient,
) -> EventDispatcher:
    """Dispatcher with a short debounce, wired to the fake client."""
    state = BridgeState(config=config, cache=cache)
    return EventDispatcher(host, fake_client, state, debounce_seconds=0.05)


# === HTTP Fixtures ===


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def influx_client_factory(
    recorded_requests: list[httpx.Request],
) -> Callable[..., InfluxLineClient]:
    """Factory for an InfluxLineClient backed by httpx.MockTransport.

    Usage:
        client = influx_client_factory(status_code=204)
        client = influx_client_factory(handler=custom_handler)
    """

    def _factory(
        status_code: int = 204,
        text: str = "",
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> InfluxLineClient:
        def _record(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            if handler is not None:
                return handler(request)
            return httpx.Response(status_code, text=text)

        http = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        return InfluxLineClient(http)

    return _factory


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(dispatcher)
            async with asgi_test_client(app) as client:
                response = await client.post("/messages", json={...})
    """

    def _get_client(app):
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
