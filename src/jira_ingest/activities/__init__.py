"""Activity façade module initialization."""

from .activities import (
    FetchAllIssuesInput,
    FetchAllIssuesOutput,
    FetchIssueInput,
    FetchIssueOutput,
    FetchIssuesInput,
    FetchIssuesOutput,
    SearchAllJQLInput,
    SearchAllJQLOutput,
    SearchJQLInput,
    SearchJQLOutput,
    fetch_all_issues_activity,
    fetch_issue_activity,
    fetch_issues_activity,
    search_all_jql_activity,
    search_jql_activity,
)
from .context import ActivityContext
from .registry import ActivityDefinition, ActivityRegistry, build_provider

__all__ = [
    "ActivityContext",
    "ActivityDefinition",
    "ActivityRegistry",
    "FetchAllIssuesInput",
    "FetchAllIssuesOutput",
    "FetchIssueInput",
    "FetchIssueOutput",
    "FetchIssuesInput",
    "FetchIssuesOutput",
    "SearchAllJQLInput",
    "SearchAllJQLOutput",
    "SearchJQLInput",
    "SearchJQLOutput",
    "build_provider",
    "fetch_all_issues_activity",
    "fetch_issue_activity",
    "fetch_issues_activity",
    "search_all_jql_activity",
    "search_jql_activity",
]
