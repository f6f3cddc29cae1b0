from __future__ import annotations

import asyncio

import pytest

from jira_ingest.errors import CursorError, PaginationCancelled, PaginationLimitError
from jira_ingest.sync.pagination import encode_cursor, paginate_all, parse_cursor
from jira_ingest.upstream.base import Page


class _ScriptedFetcher:
    """Returns pre-set page sizes and records every cursor it is called with."""

    def __init__(self, sizes: list[int], total: int) -> None:
        self.sizes = list(sizes)
        self.total = total
        self.cursors: list[str] = []
        self.page_sizes: list[int] = []
        self._next_item = 0

    async def fetch_page(self, cursor: str, page_size: int) -> Page[int]:
        self.cursors.append(cursor)
        self.page_sizes.append(page_size)
        size = self.sizes.pop(0) if self.sizes else 0
        items = list(range(self._next_item, self._next_item + size))
        self._next_item += size
        return Page(items=items, total=self.total, start_at=parse_cursor(cursor))


class _Context:
    def __init__(self) -> None:
        self.cancelled = False

    def is_cancelled(self) -> bool:
        return self.cancelled


@pytest.mark.asyncio
async def test_single_page_needs_one_fetch() -> None:
    fetcher = _ScriptedFetcher([3], total=3)

    result = await paginate_all(fetcher.fetch_page, 100)

    assert result.items == [0, 1, 2]
    assert result.page_count == 1
    assert result.final_cursor == ""
    assert fetcher.cursors == [""]


@pytest.mark.asyncio
async def test_three_pages_of_250_items() -> None:
    fetcher = _ScriptedFetcher([100, 100, 50], total=250)

    result = await paginate_all(fetcher.fetch_page, 100)

    assert len(result.items) == 250
    assert result.items == list(range(250))
    assert result.page_count == 3
    assert result.final_cursor == ""
    assert fetcher.cursors == ["", "100", "200"]


@pytest.mark.asyncio
async def test_cursor_is_sum_of_previous_page_lengths() -> None:
    # Server returns fewer items than requested; the cursor follows what came back.
    fetcher = _ScriptedFetcher([7, 3, 5], total=15)

    result = await paginate_all(fetcher.fetch_page, 10)

    assert fetcher.cursors == ["", "7", "10"]
    assert len(result.items) == 15
    assert result.page_count == 3


@pytest.mark.asyncio
async def test_empty_page_with_more_reported_ends_run() -> None:
    fetcher = _ScriptedFetcher([4, 0, 4], total=10)

    result = await paginate_all(fetcher.fetch_page, 4)

    assert fetcher.cursors == ["", "4"]
    assert result.items == [0, 1, 2, 3]
    assert result.page_count == 2
    assert result.final_cursor == ""


@pytest.mark.asyncio
async def test_empty_dataset() -> None:
    fetcher = _ScriptedFetcher([0], total=0)

    result = await paginate_all(fetcher.fetch_page)

    assert result.items == []
    assert result.page_count == 1


@pytest.mark.asyncio
async def test_non_positive_page_size_defaults_to_100() -> None:
    fetcher = _ScriptedFetcher([1], total=1)

    await paginate_all(fetcher.fetch_page, 0)

    assert fetcher.page_sizes == [100]


@pytest.mark.asyncio
async def test_resume_from_cursor() -> None:
    fetcher = _ScriptedFetcher([50, 50], total=150)

    result = await paginate_all(fetcher.fetch_page, 50, start_cursor="50")

    assert fetcher.cursors == ["50", "100"]
    assert len(result.items) == 100


@pytest.mark.asyncio
async def test_invalid_start_cursor_is_terminal() -> None:
    fetcher = _ScriptedFetcher([10], total=10)

    with pytest.raises(CursorError, match="parse cursor"):
        await paginate_all(fetcher.fetch_page, 10, start_cursor="abc")

    assert fetcher.cursors == []


@pytest.mark.asyncio
async def test_cancellation_between_pages_reports_partial_items() -> None:
    context = _Context()
    fetcher = _ScriptedFetcher([100, 100, 50], total=250)
    original = fetcher.fetch_page

    async def fetch_then_cancel(cursor: str, page_size: int) -> Page[int]:
        page = await original(cursor, page_size)
        context.cancelled = True
        return page

    with pytest.raises(PaginationCancelled) as excinfo:
        await paginate_all(fetch_then_cancel, 100, context=context)

    assert fetcher.cursors == [""]
    assert excinfo.value.items == list(range(100))
    assert excinfo.value.page_count == 1
    assert excinfo.value.cursor == "100"


@pytest.mark.asyncio
async def test_max_pages_bound() -> None:
    fetcher = _ScriptedFetcher([10] * 5, total=50)

    with pytest.raises(PaginationLimitError) as excinfo:
        await paginate_all(fetcher.fetch_page, 10, max_pages=2)

    assert fetcher.cursors == ["", "10"]
    assert excinfo.value.cursor == "20"


@pytest.mark.asyncio
async def test_fetch_errors_propagate_unchanged() -> None:
    async def failing(cursor: str, page_size: int) -> Page[int]:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await paginate_all(failing, 10)


def test_parse_and_encode_cursor() -> None:
    assert parse_cursor("") == 0
    assert parse_cursor("200") == 200
    assert encode_cursor(0) == ""
    assert encode_cursor(200) == "200"

    with pytest.raises(CursorError):
        parse_cursor("-5")
    with pytest.raises(CursorError):
        parse_cursor("1.5")


@pytest.mark.asyncio
async def test_zero_start_cursor_is_normalized() -> None:
    fetcher = _ScriptedFetcher([5, 5], total=10)

    result = await paginate_all(fetcher.fetch_page, 5, start_cursor="0")

    assert fetcher.cursors == ["", "5"]
    assert len(result.items) == 10


@pytest.mark.asyncio
async def test_cursor_error_after_earlier_pages_aborts_run() -> None:
    fetcher = _ScriptedFetcher([10, 10, 10], total=30)
    original = fetcher.fetch_page

    async def reject_second_cursor(cursor: str, page_size: int) -> Page[int]:
        if cursor:
            raise CursorError(f"parse cursor: {cursor!r} rejected")
        return await original(cursor, page_size)

    with pytest.raises(CursorError, match="rejected"):
        await paginate_all(reject_second_cursor, 10)

    # Only the first page was fetched and its items are not returned anywhere.
    assert fetcher.cursors == [""]


@pytest.mark.asyncio
async def test_task_cancellation_aborts_in_flight_fetch() -> None:
    fetcher = _ScriptedFetcher([10, 10], total=20)
    started = asyncio.Event()
    calls = []

    async def hang_on_second_page(cursor: str, page_size: int) -> Page[int]:
        calls.append(cursor)
        if cursor:
            started.set()
            await asyncio.Event().wait()
        return await fetcher.fetch_page(cursor, page_size)

    task = asyncio.create_task(paginate_all(hang_on_second_page, 10))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert calls == ["", "10"]
