"""JQL query construction."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..errors import RequestError

# Jira JQL date literal layout
JQL_TIME_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class IssueQuery:
    """
    Either a project filter or a raw JQL string.

    A project filter compiles to issues of that project ordered by last update,
    newest first, optionally limited to issues updated since a point in time.
    A raw query is sent verbatim.
    """
    project: str = ""
    since: Optional[datetime] = None
    raw: Optional[str] = None

    def __post_init__(self):
        if self.raw is None and not self.project:
            raise RequestError("build query: a project or a raw JQL string is required")

    @classmethod
    def for_project(cls, project: str, since: Optional[datetime] = None) -> "IssueQuery":
        return cls(project=project, since=since)

    @classmethod
    def from_jql(cls, jql: str) -> "IssueQuery":
        return cls(raw=jql)

    def compile(self) -> str:
        """Return the JQL string sent to the search endpoint."""
        if self.raw is not None:
            return self.raw
        return build_project_jql(self.project, self.since)


def build_project_jql(project: str, since: Optional[datetime] = None) -> str:
    """
    Build the JQL for all issues of a project, newest updates first.

    Args:
        project: Project key or id
        since: Only include issues updated at or after this time

    Returns:
        JQL string
    """
    if since is None:
        return f"project = {project} ORDER BY updated DESC"
    return (
        f"project = {project} AND updated >= '{since.strftime(JQL_TIME_FORMAT)}' "
        "ORDER BY updated DESC"
    )
