"""Page fetchers that adapt the Jira client to the pagination engine."""

from typing import Optional

import httpx

from ..upstream.base import Issue, Page
from ..upstream.jira import JiraClient, JiraCredentials
from ..upstream.query import IssueQuery
from .pagination import parse_cursor


class IssuePageFetcher:
    """Fetch pages of issues for one query, decoding the cursor as startAt."""

    def __init__(
        self,
        credentials: JiraCredentials,
        query: IssueQuery,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.query = query
        self.transport = transport

    async def fetch_page(self, cursor: str, page_size: int) -> Page[Issue]:
        """
        Fetch the page of issues starting at ``cursor``.

        A new client is opened for every page so no HTTP state outlives the
        call. Client errors propagate unlabelled; the calling activity adds
        the stage.

        Raises:
            CursorError: The cursor is not a valid offset
            JiraIngestError: The search request failed
        """
        start_at = parse_cursor(cursor)

        async with JiraClient(self.credentials, transport=self.transport) as client:
            return await client.fetch_page(self.query, start_at, page_size)
