"""Jira wire models, the page type, and the page fetcher protocol."""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Status:
    name: str = ""
    id: str = ""


@dataclass(frozen=True)
class IssueType:
    name: str = ""
    id: str = ""


@dataclass(frozen=True)
class Project:
    key: str = ""
    name: str = ""
    id: str = ""


@dataclass(frozen=True)
class Priority:
    name: str = ""
    id: str = ""


@dataclass(frozen=True)
class User:
    display_name: str = ""
    email_address: str = ""
    account_id: str = ""


@dataclass(frozen=True)
class Comment:
    id: str = ""
    body: str = ""
    author: User = field(default_factory=User)
    created: str = ""
    updated: str = ""


@dataclass(frozen=True)
class IssueFields:
    summary: str = ""
    description: str = ""
    status: Status = field(default_factory=Status)
    issue_type: IssueType = field(default_factory=IssueType)
    project: Project = field(default_factory=Project)
    created: str = ""
    updated: str = ""
    labels: List[str] = field(default_factory=list)
    priority: Optional[Priority] = None
    assignee: Optional[User] = None
    reporter: Optional[User] = None
    comments: List[Comment] = field(default_factory=list)


@dataclass(frozen=True)
class Issue:
    """A Jira issue as returned by the REST API."""
    id: str
    key: str
    self_url: str = ""
    fields: IssueFields = field(default_factory=IssueFields)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        """
        Build an Issue from the Jira JSON payload.

        Missing or null objects fall back to empty values instead of raising,
        and ADF rich-text bodies are flattened to plain text.

        Args:
            data: One element of ``issues`` in a search response, or the
                body of ``GET /issue/{key}``

        Returns:
            Parsed Issue
        """
        raw_fields = _as_dict(data.get("fields"))

        comment_block = _as_dict(raw_fields.get("comment"))
        comments = [
            Comment(
                id=_as_str(c.get("id")),
                body=adf_to_text(c.get("body")),
                author=_user(c.get("author")) or User(),
                created=_as_str(c.get("created")),
                updated=_as_str(c.get("updated")),
            )
            for c in comment_block.get("comments") or []
            if isinstance(c, dict)
        ]

        status = _as_dict(raw_fields.get("status"))
        issue_type = _as_dict(raw_fields.get("issuetype"))
        project = _as_dict(raw_fields.get("project"))
        priority = raw_fields.get("priority")

        fields = IssueFields(
            summary=_as_str(raw_fields.get("summary")),
            description=adf_to_text(raw_fields.get("description")),
            status=Status(name=_as_str(status.get("name")), id=_as_str(status.get("id"))),
            issue_type=IssueType(
                name=_as_str(issue_type.get("name")), id=_as_str(issue_type.get("id"))
            ),
            project=Project(
                key=_as_str(project.get("key")),
                name=_as_str(project.get("name")),
                id=_as_str(project.get("id")),
            ),
            created=_as_str(raw_fields.get("created")),
            updated=_as_str(raw_fields.get("updated")),
            labels=[str(label) for label in raw_fields.get("labels") or []],
            priority=(
                Priority(name=_as_str(priority.get("name")), id=_as_str(priority.get("id")))
                if isinstance(priority, dict)
                else None
            ),
            assignee=_user(raw_fields.get("assignee")),
            reporter=_user(raw_fields.get("reporter")),
            comments=comments,
        )

        return cls(
            id=_as_str(data.get("id")),
            key=_as_str(data.get("key")),
            self_url=_as_str(data.get("self")),
            fields=fields,
        )


@dataclass
class Page(Generic[T]):
    """One fetch result: the items plus the server-reported total."""
    items: List[T]
    total: int
    start_at: int = 0


class PageFetcher(Protocol):
    """Anything that can return one page of items for a cursor."""

    async def fetch_page(self, cursor: str, page_size: int) -> Page:
        """Fetch the page starting at ``cursor`` ("" means the first page)."""
        ...


def adf_to_text(value: Any) -> str:
    """
    Flatten an Atlassian Document Format node to plain text.

    Strings pass through unchanged. Block nodes (paragraphs, headings, list
    items) are separated by newlines; anything unrecognised yields "".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if not isinstance(value, dict):
        return ""

    node_type = value.get("type")
    if node_type == "text":
        return _as_str(value.get("text"))
    if node_type == "hardBreak":
        return "\n"

    children = [adf_to_text(child) for child in value.get("content") or []]
    if node_type in ("doc", "bulletList", "orderedList", "listItem", "blockquote", "table", "tableRow"):
        return "\n".join(part for part in children if part)
    return "".join(children)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _user(value: Any) -> Optional[User]:
    if not isinstance(value, dict):
        return None
    return User(
        display_name=_as_str(value.get("displayName")),
        email_address=_as_str(value.get("emailAddress")),
        account_id=_as_str(value.get("accountId")),
    )
