"""Jira activities: fetch, normalize and store issues."""

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Callable, List, Optional, Sequence

from ..db.store import DataRef
from ..errors import ActivityError, JiraIngestError
from ..sync.fetchers import IssuePageFetcher
from ..sync.pagination import DEFAULT_PAGE_SIZE, paginate_all
from ..transform.document import Document, issue_to_document
from ..upstream.base import Issue, PageFetcher
from ..upstream.jira import JiraClient, JiraCredentials
from ..upstream.query import IssueQuery
from .context import ActivityContext

logger = logging.getLogger(__name__)


@dataclass
class FetchIssuesInput:
    credentials: JiraCredentials
    project: str
    since: Optional[datetime] = None
    max_results: int = 0


@dataclass
class FetchIssuesOutput:
    """Handle to the stored page plus the page size and the server total."""
    ref: DataRef
    count: int
    total: int


@dataclass
class SearchJQLInput:
    credentials: JiraCredentials
    jql: str
    max_results: int = 0


SearchJQLOutput = FetchIssuesOutput


@dataclass
class FetchIssueInput:
    credentials: JiraCredentials
    issue_key: str


@dataclass
class FetchIssueOutput:
    document: Optional[Document]
    found: bool


@dataclass
class FetchAllIssuesInput:
    credentials: JiraCredentials
    project: str
    since: Optional[datetime] = None
    max_results: int = 0  # per page
    cursor: str = ""  # resume point from an earlier run


@dataclass
class SearchAllJQLInput:
    credentials: JiraCredentials
    jql: str
    max_results: int = 0  # per page
    cursor: str = ""


@dataclass
class FetchAllIssuesOutput:
    ref: DataRef
    count: int
    page_count: int
    final_cursor: str


SearchAllJQLOutput = FetchAllIssuesOutput


async def fetch_issues_activity(
    ctx: ActivityContext, input: FetchIssuesInput
) -> FetchIssuesOutput:
    """Fetch one page of a project's issues and store them."""
    build_query = partial(IssueQuery.for_project, input.project, input.since)
    return await _search_and_store(ctx, input.credentials, build_query, input.max_results)


async def search_jql_activity(
    ctx: ActivityContext, input: SearchJQLInput
) -> SearchJQLOutput:
    """Fetch one page of issues for a raw JQL query and store them."""
    build_query = partial(IssueQuery.from_jql, input.jql)
    return await _search_and_store(ctx, input.credentials, build_query, input.max_results)


async def fetch_issue_activity(
    ctx: ActivityContext, input: FetchIssueInput
) -> FetchIssueOutput:
    """
    Fetch a single issue by key.

    The document is returned directly rather than stored. An issue Jira
    reports as missing yields ``found=False``.
    """
    async with JiraClient(input.credentials, transport=ctx.transport) as client:
        try:
            issue = await client.get_issue(input.issue_key)
        except JiraIngestError as e:
            raise ActivityError("get issue", e) from e

    if issue is None:
        logger.info(f"Issue {input.issue_key} not found")
        return FetchIssueOutput(document=None, found=False)

    return FetchIssueOutput(document=issue_to_document(issue), found=True)


async def fetch_all_issues_activity(
    ctx: ActivityContext, input: FetchAllIssuesInput
) -> FetchAllIssuesOutput:
    """Fetch every issue of a project across all pages and store them."""
    build_query = partial(IssueQuery.for_project, input.project, input.since)
    return await _paginate_and_store(
        ctx, input.credentials, build_query, input.max_results, input.cursor
    )


async def search_all_jql_activity(
    ctx: ActivityContext, input: SearchAllJQLInput
) -> SearchAllJQLOutput:
    """Fetch every issue matching a raw JQL query and store them."""
    build_query = partial(IssueQuery.from_jql, input.jql)
    return await _paginate_and_store(
        ctx, input.credentials, build_query, input.max_results, input.cursor
    )


async def _search_and_store(
    ctx: ActivityContext,
    credentials: JiraCredentials,
    build_query: Callable[[], IssueQuery],
    max_results: int,
) -> FetchIssuesOutput:
    if max_results <= 0:
        max_results = DEFAULT_PAGE_SIZE

    async with JiraClient(credentials, transport=ctx.transport) as client:
        try:
            page = await client.search_jql(build_query().compile(), max_results)
        except JiraIngestError as e:
            raise ActivityError("search jql", e) from e

    docs = _to_documents(page.items)
    ref = _store(ctx, docs)

    return FetchIssuesOutput(ref=ref, count=len(docs), total=page.total)


async def _paginate_and_store(
    ctx: ActivityContext,
    credentials: JiraCredentials,
    build_query: Callable[[], IssueQuery],
    max_results: int,
    cursor: str,
) -> FetchAllIssuesOutput:
    try:
        fetcher: PageFetcher = IssuePageFetcher(
            credentials, build_query(), transport=ctx.transport
        )
        result = await paginate_all(
            fetcher.fetch_page,
            max_results,
            start_cursor=cursor,
            context=ctx,
            max_pages=ctx.max_pages,
        )
    except JiraIngestError as e:
        logger.error(f"{ctx.name or 'fetch all'} failed: {e}")
        raise ActivityError("paginate", e) from e

    docs = _to_documents(result.items)
    ref = _store(ctx, docs)

    logger.info(
        f"{ctx.name or 'fetch all'} stored {len(docs)} issues "
        f"from {result.page_count} pages"
    )

    return FetchAllIssuesOutput(
        ref=ref,
        count=len(docs),
        page_count=result.page_count,
        final_cursor=result.final_cursor,
    )


def _to_documents(issues: Sequence[Issue]) -> List[Document]:
    return [issue_to_document(issue) for issue in issues]


def _store(ctx: ActivityContext, docs: List[Document]) -> DataRef:
    try:
        return ctx.store.store_documents(docs)
    except Exception as e:
        raise ActivityError("store documents", e) from e
