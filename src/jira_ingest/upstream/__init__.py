"""Upstream Jira integration module initialization."""

from .base import (
    Comment,
    Issue,
    IssueFields,
    IssueType,
    Page,
    PageFetcher,
    Priority,
    Project,
    Status,
    User,
)
from .jira import JiraClient, JiraCredentials, SearchJQLParams
from .query import IssueQuery, build_project_jql

__all__ = [
    "Comment",
    "Issue",
    "IssueFields",
    "IssueQuery",
    "IssueType",
    "JiraClient",
    "JiraCredentials",
    "Page",
    "PageFetcher",
    "Priority",
    "Project",
    "SearchJQLParams",
    "Status",
    "User",
    "build_project_jql",
]
