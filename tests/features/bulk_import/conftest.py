"""BDD step definitions for the historical bulk import feature."""

import pytest
from pytest_bdd import given, parsers, then, when
from tests.features.bulk_import.steps_helpers import (
    ImportScenarioContext,
    make_tasks,
    run_async,
)

from taskbridge.core.config import BridgeConfig
from taskbridge.core.models import Severity
from taskbridge.runtime import TaskBridge


@pytest.fixture
def ctx() -> ImportScenarioContext:
    """Fresh scenario context for each test."""
    return ImportScenarioContext()


# === Given ===


@given("a complete endpoint configuration")
def complete_config(ctx: ImportScenarioContext) -> None:
    ctx.config = BridgeConfig("http://influx.test/api/v2/write", "tok")


@given("the endpoint configuration has no token")
def config_without_token(ctx: ImportScenarioContext) -> None:
    ctx.config = BridgeConfig(ctx.config.endpoint_url, "")


@given(
    parsers.parse(
        "the host has {archived:d} archived tasks and {active:d} active tasks"
    )
)
def host_with_tasks(ctx: ImportScenarioContext, archived: int, active: int) -> None:
    ctx.host.archived_tasks = make_tasks(archived, "a")
    ctx.host.active_tasks = make_tasks(active, "b")


@given(parsers.parse("the endpoint rejects write request {number:d}"))
def endpoint_rejects(ctx: ImportScenarioContext, number: int) -> None:
    ctx.client.fail_on_call = number


# === When ===


@when("the user requests a historical import")
def request_import(ctx: ImportScenarioContext) -> None:
    ctx.host.stored_config = ctx.config.to_json()
    bridge = TaskBridge(ctx.host, ctx.client)

    async def _run() -> None:
        async with bridge.attached() as dispatcher:
            await dispatcher.handle_message({"type": "PLUGIN_IMPORT_HISTORY"})

    run_async(_run())


# === Then ===


@then(parsers.parse("{count:d} write requests are made with sizes {sizes}"))
def write_requests_made(ctx: ImportScenarioContext, count: int, sizes: str) -> None:
    expected = [int(size) for size in sizes.split(",")]
    assert len(ctx.client.sent) == count
    assert [len(batch.points) for batch in ctx.client.sent] == expected


@then(parsers.parse("{count:d} batch is delivered before the failure"))
def batches_before_failure(ctx: ImportScenarioContext, count: int) -> None:
    assert len(ctx.client.sent) == count


@then("no write request is delivered")
def nothing_delivered(ctx: ImportScenarioContext) -> None:
    assert ctx.client.sent == []


@then(parsers.parse('the user is notified "{message}"'))
def user_notified(ctx: ImportScenarioContext, message: str) -> None:
    assert message in [n.message for n in ctx.host.notifications]


@then(parsers.parse('the last notification is an error starting with "{prefix}"'))
def last_notification_error(ctx: ImportScenarioContext, prefix: str) -> None:
    last = ctx.host.notifications[-1]
    assert last.severity is Severity.ERROR
    assert last.message.startswith(prefix)


@then("no success notification is shown")
def no_success(ctx: ImportScenarioContext) -> None:
    assert all(n.severity is not Severity.SUCCESS for n in ctx.host.notifications)
