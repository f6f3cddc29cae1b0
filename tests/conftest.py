from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from jira_ingest.db import SQLiteDocumentStore, connect, init_db
from jira_ingest.upstream import JiraCredentials

BASE_URL = "https://example.atlassian.net"


def make_issue(n: int, **field_overrides: Any) -> dict[str, Any]:
    key = f"PROJ-{n}"
    fields: dict[str, Any] = {
        "summary": f"Issue {n}",
        "description": "",
        "status": {"name": "Open", "id": "1"},
        "issuetype": {"name": "Bug", "id": "10001"},
        "project": {"key": "PROJ", "name": "Project", "id": "10000"},
        "created": "2024-01-28T09:00:00.000+0000",
        "updated": "2024-01-29T14:30:45.123+0000",
        "labels": [],
        "priority": None,
        "assignee": None,
        "reporter": None,
        "comment": {"total": 0, "comments": []},
    }
    fields.update(field_overrides)
    return {
        "id": str(10000 + n),
        "key": key,
        "self": f"{BASE_URL}/rest/api/3/issue/{10000 + n}",
        "fields": fields,
    }


class FakeJira:
    """In-memory Jira search and issue endpoints served through MockTransport."""

    def __init__(
        self,
        issues: list[dict[str, Any]],
        *,
        status_code: int = 200,
        error_body: str = "",
        on_request: Optional[Callable[[httpx.Request], None]] = None,
    ) -> None:
        self.issues = issues
        self.status_code = status_code
        self.error_body = error_body
        self.on_request = on_request
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def start_ats(self) -> list[int]:
        return [int(r.url.params["startAt"]) for r in self.requests if r.url.path.endswith("/search")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.on_request is not None:
            self.on_request(request)

        if self.status_code != 200:
            return httpx.Response(self.status_code, text=self.error_body)

        path = request.url.path
        if path == "/rest/api/3/search":
            start_at = int(request.url.params.get("startAt", "0"))
            max_results = int(request.url.params.get("maxResults", "50"))
            page = self.issues[start_at : start_at + max_results]
            return httpx.Response(
                200,
                content=json.dumps(
                    {
                        "startAt": start_at,
                        "maxResults": max_results,
                        "total": len(self.issues),
                        "issues": page,
                    }
                ),
            )

        if path.startswith("/rest/api/3/issue/"):
            key = path.rsplit("/", 1)[1]
            for issue in self.issues:
                if issue["key"] == key:
                    return httpx.Response(200, content=json.dumps(issue))
            return httpx.Response(404, text='{"errorMessages":["Issue does not exist"]}')

        return httpx.Response(404, text="no route")


@pytest.fixture
def credentials() -> JiraCredentials:
    return JiraCredentials(base_url=BASE_URL, email="me@example.com", api_token="secret-token")


@pytest.fixture
def store() -> SQLiteDocumentStore:
    conn = init_db(connect(":memory:"))
    yield SQLiteDocumentStore(conn)
    conn.close()
