"""Registry of named activities exposed to the orchestration runtime."""

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, Optional

from ..config import settings
from .activities import (
    FetchAllIssuesInput,
    FetchIssueInput,
    FetchIssuesInput,
    SearchAllJQLInput,
    SearchJQLInput,
    fetch_all_issues_activity,
    fetch_issue_activity,
    fetch_issues_activity,
    search_all_jql_activity,
    search_jql_activity,
)
from .context import ActivityContext

PROVIDER_NAME = "jira-ingest"
PROVIDER_VERSION = "1.0.0"

FETCH_ISSUES = "jira.FetchIssues"
FETCH_ISSUE = "jira.FetchIssue"
SEARCH_JQL = "jira.SearchJQL"
FETCH_ALL_ISSUES = "jira.FetchAllIssues"
SEARCH_ALL_JQL = "jira.SearchAllJQL"

ActivityFn = Callable[[ActivityContext, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ActivityDefinition:
    """A named activity and the duration it declares to the runtime."""
    name: str
    fn: ActivityFn
    input_type: type
    start_to_close_timeout: Optional[timedelta] = None


class ActivityRegistry:
    """Registry for the activities of one provider."""

    def __init__(self, provider_name: str = PROVIDER_NAME, version: str = PROVIDER_VERSION):
        """Initialize empty registry."""
        self.provider_name = provider_name
        self.version = version
        self._activities: Dict[str, ActivityDefinition] = {}

    def register(
        self,
        name: str,
        fn: ActivityFn,
        input_type: type,
        start_to_close_timeout: Optional[timedelta] = None,
    ) -> "ActivityRegistry":
        """
        Register an activity under a stable name.

        Args:
            name: Activity name (e.g., 'jira.FetchIssues')
            fn: Coroutine function ``(ctx, input) -> output``
            input_type: Dataclass the activity takes as input
            start_to_close_timeout: Declared maximum duration, if it differs
                from the runtime default

        Returns:
            The registry, for chaining
        """
        if name in self._activities:
            raise ValueError(f"Activity '{name}' already registered")
        self._activities[name] = ActivityDefinition(
            name=name,
            fn=fn,
            input_type=input_type,
            start_to_close_timeout=start_to_close_timeout,
        )
        return self

    def get(self, name: str) -> Optional[ActivityDefinition]:
        """
        Get a registered activity by name.

        Returns:
            ActivityDefinition or None if not found
        """
        return self._activities.get(name)

    def get_all(self) -> Dict[str, ActivityDefinition]:
        """Get all registered activities keyed by name."""
        return self._activities.copy()

    def get_names(self) -> list[str]:
        """Get list of registered activity names."""
        return list(self._activities.keys())

    async def run(self, name: str, ctx: ActivityContext, input: Any) -> Any:
        """
        Run one activity, enforcing its declared timeout.

        Raises:
            KeyError: No activity is registered under ``name``
            asyncio.TimeoutError: The declared timeout elapsed
        """
        definition = self._activities.get(name)
        if definition is None:
            raise KeyError(f"Activity '{name}' not registered")

        ctx.name = name
        if definition.start_to_close_timeout is None:
            return await definition.fn(ctx, input)
        return await asyncio.wait_for(
            definition.fn(ctx, input),
            timeout=definition.start_to_close_timeout.total_seconds(),
        )

    def __len__(self) -> int:
        """Return number of registered activities."""
        return len(self._activities)


def build_provider(long_running_timeout: Optional[timedelta] = None) -> ActivityRegistry:
    """
    Build the registry with every Jira activity.

    The fetch-all activities declare a long timeout since a full sync can
    take many sequential page round-trips.
    """
    if long_running_timeout is None:
        long_running_timeout = timedelta(minutes=settings.long_running_timeout_minutes)

    return (
        ActivityRegistry()
        .register(FETCH_ISSUES, fetch_issues_activity, FetchIssuesInput)
        .register(FETCH_ISSUE, fetch_issue_activity, FetchIssueInput)
        .register(SEARCH_JQL, search_jql_activity, SearchJQLInput)
        .register(
            FETCH_ALL_ISSUES,
            fetch_all_issues_activity,
            FetchAllIssuesInput,
            start_to_close_timeout=long_running_timeout,
        )
        .register(
            SEARCH_ALL_JQL,
            search_all_jql_activity,
            SearchAllJQLInput,
            start_to_close_timeout=long_running_timeout,
        )
    )
