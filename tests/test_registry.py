from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from jira_ingest.activities import (
    ActivityContext,
    ActivityRegistry,
    FetchIssuesInput,
    build_provider,
)
from jira_ingest.activities.registry import (
    FETCH_ALL_ISSUES,
    FETCH_ISSUE,
    FETCH_ISSUES,
    PROVIDER_NAME,
    SEARCH_ALL_JQL,
    SEARCH_JQL,
)

from conftest import FakeJira, make_issue


def test_provider_registers_all_activities() -> None:
    registry = build_provider()

    assert registry.provider_name == PROVIDER_NAME
    assert sorted(registry.get_names()) == sorted(
        [FETCH_ISSUES, FETCH_ISSUE, SEARCH_JQL, FETCH_ALL_ISSUES, SEARCH_ALL_JQL]
    )
    assert len(registry) == 5


def test_fetch_all_activities_declare_long_timeout() -> None:
    registry = build_provider(long_running_timeout=timedelta(minutes=30))

    assert registry.get(FETCH_ALL_ISSUES).start_to_close_timeout == timedelta(minutes=30)
    assert registry.get(SEARCH_ALL_JQL).start_to_close_timeout == timedelta(minutes=30)
    assert registry.get(FETCH_ISSUES).start_to_close_timeout is None
    assert registry.get(FETCH_ISSUE).start_to_close_timeout is None


def test_duplicate_registration_rejected() -> None:
    async def noop(ctx, input):
        return None

    registry = ActivityRegistry().register("x.Noop", noop, dict)

    with pytest.raises(ValueError, match="already registered"):
        registry.register("x.Noop", noop, dict)


@pytest.mark.asyncio
async def test_run_dispatches_by_name(credentials, store) -> None:
    fake = FakeJira([make_issue(1), make_issue(2)])
    ctx = ActivityContext(store=store, transport=fake.transport)

    output = await build_provider().run(FETCH_ISSUES, ctx, FetchIssuesInput(credentials, "PROJ"))

    assert ctx.name == FETCH_ISSUES
    assert output.count == 2


@pytest.mark.asyncio
async def test_run_unknown_activity(store) -> None:
    with pytest.raises(KeyError):
        await build_provider().run("jira.Nope", ActivityContext(store=store), None)


@pytest.mark.asyncio
async def test_run_enforces_declared_timeout(store) -> None:
    async def slow(ctx, input):
        await asyncio.sleep(5)

    registry = ActivityRegistry().register(
        "x.Slow", slow, dict, start_to_close_timeout=timedelta(milliseconds=10)
    )

    with pytest.raises(asyncio.TimeoutError):
        await registry.run("x.Slow", ActivityContext(store=store), {})
