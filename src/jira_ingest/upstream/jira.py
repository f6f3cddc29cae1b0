"""Jira Cloud REST API client."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from ..errors import DecodeError, JiraAPIError, RequestError, TransportError
from .base import Issue, Page
from .query import IssueQuery

logger = logging.getLogger(__name__)

API_PREFIX = "/rest/api/3"

# Jira's own default when maxResults is omitted
SERVICE_DEFAULT_MAX_RESULTS = 50


@dataclass(frozen=True)
class JiraCredentials:
    """Connection settings for one Jira site."""
    base_url: str
    email: str
    api_token: str
    timeout: float = 30.0


@dataclass(frozen=True)
class SearchJQLParams:
    jql: str
    start_at: int = 0
    max_results: int = 0


class JiraClient:
    """Client for the Jira REST API (v3)."""

    def __init__(
        self,
        credentials: JiraCredentials,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Jira client.

        Args:
            credentials: Site URL, account email and API token
            transport: Optional httpx transport (proxies, tests)
        """
        self.api_base = credentials.base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            timeout=credentials.timeout or 30.0,
            auth=(credentials.email, credentials.api_token),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def search_jql(self, jql: str, max_results: int) -> Page[Issue]:
        """Return the first page of issues matching ``jql``."""
        return await self.search_jql_with_params(
            SearchJQLParams(jql=jql, start_at=0, max_results=max_results)
        )

    async def search_jql_with_params(self, params: SearchJQLParams) -> Page[Issue]:
        """
        Search issues with full pagination control.

        Args:
            params: JQL, zero-based start offset and page size ceiling

        Returns:
            Page of parsed issues with the server-reported total

        Raises:
            RequestError: The endpoint URL is malformed
            TransportError: The request failed on the network
            JiraAPIError: Jira returned a non-200 status
            DecodeError: The body was not valid JSON
        """
        max_results = params.max_results
        if max_results <= 0:
            max_results = SERVICE_DEFAULT_MAX_RESULTS

        response = await self._get(
            "/search",
            params={
                "jql": params.jql,
                "startAt": params.start_at,
                "maxResults": max_results,
            },
        )
        if response.status_code != httpx.codes.OK:
            raise JiraAPIError(response.status_code, response.text)

        data = self._decode(response)
        issues = [
            Issue.from_dict(raw) for raw in data.get("issues") or [] if isinstance(raw, dict)
        ]
        start_at = data.get("startAt", params.start_at)

        logger.debug(
            f"Jira search returned {len(issues)} issues "
            f"(startAt={start_at}, total={data.get('total')})"
        )

        return Page(
            items=issues,
            total=int(data.get("total") or 0),
            start_at=int(start_at or 0),
        )

    async def fetch_page(self, query: IssueQuery, start_at: int, max_results: int) -> Page[Issue]:
        """Fetch one page of issues for a compiled query."""
        return await self.search_jql_with_params(
            SearchJQLParams(jql=query.compile(), start_at=start_at, max_results=max_results)
        )

    async def get_issue(self, issue_key: str) -> Optional[Issue]:
        """
        Retrieve a single issue by key.

        Args:
            issue_key: Issue key (e.g., PROJ-123) or numeric id

        Returns:
            Parsed Issue, or None when Jira reports 404
        """
        response = await self._get(f"/issue/{quote(issue_key, safe='')}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.status_code != httpx.codes.OK:
            raise JiraAPIError(response.status_code, response.text)

        return Issue.from_dict(self._decode(response))

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            request = self.client.build_request(
                "GET", f"{self.api_base}{API_PREFIX}{path}", params=params
            )
        except httpx.InvalidURL as e:
            raise RequestError(f"create request: {e}") from e

        try:
            return await self.client.send(request)
        except httpx.UnsupportedProtocol as e:
            raise RequestError(f"create request: {e}") from e
        except httpx.TransportError as e:
            raise TransportError(f"execute request: {e}") from e

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"decode response: {e}") from e
        if not isinstance(data, dict):
            raise DecodeError(f"decode response: expected object, got {type(data).__name__}")
        return data
