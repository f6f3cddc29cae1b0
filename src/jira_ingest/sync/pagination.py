"""Cursor pagination: turn a page-at-a-time fetch into a complete fetch-all."""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, List, Optional, Protocol, TypeVar

from ..errors import CursorError, PaginationCancelled, PaginationLimitError
from ..upstream.base import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 100

FetchPageFn = Callable[[str, int], Awaitable[Page[T]]]


class CancellationSource(Protocol):
    """Anything that can report a cancellation request."""

    def is_cancelled(self) -> bool:
        ...


@dataclass
class PaginationResult(Generic[T]):
    """Result of a complete pagination run."""
    items: List[T] = field(default_factory=list)
    page_count: int = 0
    final_cursor: str = ""


def parse_cursor(cursor: str) -> int:
    """
    Decode a cursor into a zero-based start offset.

    Args:
        cursor: "" for the first page, otherwise a decimal offset

    Returns:
        Start offset

    Raises:
        CursorError: The cursor is not a non-negative integer
    """
    if cursor == "":
        return 0
    try:
        offset = int(cursor)
    except ValueError as e:
        raise CursorError(f"parse cursor: {cursor!r} is not an offset") from e
    if offset < 0:
        raise CursorError(f"parse cursor: negative offset {offset}")
    return offset


def encode_cursor(offset: int) -> str:
    """Encode a start offset as a cursor; offset 0 is the empty cursor."""
    return "" if offset == 0 else str(offset)


async def paginate_all(
    fetch_page: FetchPageFn,
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    start_cursor: str = "",
    context: Optional[CancellationSource] = None,
    max_pages: Optional[int] = None,
) -> PaginationResult:
    """
    Fetch every page sequentially and accumulate all items in memory.

    Each page starts where the previous one ended:
    ``next_offset = offset + len(page.items)`` and the run continues while
    ``next_offset < page.total``. An empty page while the server still
    reports more items ends the run as finished instead of looping.

    Args:
        fetch_page: Coroutine function ``(cursor, page_size) -> Page``
        page_size: Items requested per page (<= 0 means 100)
        start_cursor: Cursor to resume from ("" starts at offset 0)
        context: Checked between pages; a cancelled context stops the run
        max_pages: Upper bound on fetch calls for this run

    Returns:
        PaginationResult with all items, the number of pages fetched and
        an empty final cursor

    Raises:
        CursorError: ``start_cursor`` is not a valid offset
        PaginationCancelled: Cancellation was requested between pages
        PaginationLimitError: ``max_pages`` pages were fetched and more remain
    """
    if page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE

    offset = parse_cursor(start_cursor)
    cursor = encode_cursor(offset)
    items: List[T] = []
    page_count = 0

    while True:
        if context is not None and context.is_cancelled():
            raise PaginationCancelled(items, page_count, cursor)
        if max_pages is not None and page_count >= max_pages:
            raise PaginationLimitError(max_pages, cursor)

        page = await fetch_page(cursor, page_size)
        page_count += 1
        items.extend(page.items)

        next_offset = offset + len(page.items)
        has_more = next_offset < page.total

        logger.debug(
            f"Fetched page {page_count}: cursor={cursor!r}, "
            f"items={len(page.items)}, total={page.total}"
        )

        if not has_more:
            break

        if not page.items:
            # Server claims more items but returned none; no progress possible.
            logger.warning(
                f"Empty page at offset {offset} while total={page.total}; "
                "treating dataset as exhausted"
            )
            break

        offset = next_offset
        cursor = encode_cursor(next_offset)

    logger.info(f"Pagination complete: {len(items)} items in {page_count} pages")

    return PaginationResult(items=items, page_count=page_count, final_cursor="")
