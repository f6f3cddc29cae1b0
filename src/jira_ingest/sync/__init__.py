"""Sync module initialization."""

from .fetchers import IssuePageFetcher
from .pagination import (
    DEFAULT_PAGE_SIZE,
    PaginationResult,
    encode_cursor,
    paginate_all,
    parse_cursor,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "IssuePageFetcher",
    "PaginationResult",
    "encode_cursor",
    "paginate_all",
    "parse_cursor",
]
