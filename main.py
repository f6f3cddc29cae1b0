"""Entry point: run one Jira activity against the configured site."""

import argparse
import asyncio
import json
import logging
import signal
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any, Optional

from jira_ingest.activities import (
    ActivityContext,
    FetchAllIssuesInput,
    FetchIssueInput,
    FetchIssuesInput,
    SearchAllJQLInput,
    SearchJQLInput,
    build_provider,
)
from jira_ingest.config import settings
from jira_ingest.db import SQLiteDocumentStore, close_connection, init_db
from jira_ingest.errors import ActivityError
from jira_ingest.upstream import JiraCredentials

# Custom logging format
LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%m/%d/%y %H:%M:%S"


def configure_logging(level: str = "INFO"):
    """Configure unified logging format for all loggers."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    # Configure root logger
    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers = [handler]

    # Reduce noise from httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_input(input_type: type, args: argparse.Namespace) -> Any:
    """Build an activity input from settings and command-line flags."""
    credentials = JiraCredentials(
        base_url=settings.jira_base_url,
        email=settings.jira_email,
        api_token=settings.jira_api_token,
        timeout=settings.request_timeout,
    )
    project = args.project or settings.jira_project
    since: Optional[datetime] = datetime.fromisoformat(args.since) if args.since else None
    max_results = args.max_results or settings.page_size

    if input_type is FetchIssuesInput:
        return FetchIssuesInput(credentials, project, since=since, max_results=max_results)
    if input_type is FetchAllIssuesInput:
        return FetchAllIssuesInput(
            credentials, project, since=since, max_results=max_results, cursor=args.cursor
        )
    if input_type is SearchJQLInput:
        return SearchJQLInput(credentials, _require(args.jql, "--jql"), max_results=max_results)
    if input_type is SearchAllJQLInput:
        return SearchAllJQLInput(
            credentials, _require(args.jql, "--jql"), max_results=max_results, cursor=args.cursor
        )
    if input_type is FetchIssueInput:
        return FetchIssueInput(credentials, _require(args.issue, "--issue"))
    raise ValueError(f"Unsupported input type: {input_type.__name__}")


def _require(value: Optional[str], flag: str) -> str:
    if not value:
        raise SystemExit(f"{flag} is required for this activity")
    return value


def _to_json(value: Any) -> Any:
    if is_dataclass(value):
        return _to_json(asdict(value))
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def install_interrupt_handler(
    loop: asyncio.AbstractEventLoop,
    ctx: ActivityContext,
    task: Optional[asyncio.Task],
) -> None:
    """
    Route the first Ctrl-C to the running activity.

    The first SIGINT sets the cancel event and cancels ``task``, which aborts
    any in-flight request. The handler then removes itself, so a second
    Ctrl-C falls back to the default KeyboardInterrupt.
    """

    def interrupt():
        logging.getLogger(__name__).warning("Interrupted; cancelling activity (Ctrl-C again to force)")
        ctx.cancel()
        if task is not None:
            task.cancel()
        loop.remove_signal_handler(signal.SIGINT)

    try:
        loop.add_signal_handler(signal.SIGINT, interrupt)
    except NotImplementedError:
        pass


async def run(args: argparse.Namespace) -> Any:
    """Open the store and run the selected activity once."""
    logger = logging.getLogger(__name__)
    registry = build_provider()

    definition = registry.get(args.activity)
    if definition is None:
        raise SystemExit(
            f"Unknown activity '{args.activity}'. Available: {', '.join(registry.get_names())}"
        )

    conn = init_db()
    ctx = ActivityContext(
        store=SQLiteDocumentStore(conn),
        max_pages=settings.max_pages,
    )

    loop = asyncio.get_running_loop()
    install_interrupt_handler(loop, ctx, asyncio.current_task())

    logger.info(f"Running {definition.name} against {settings.jira_base_url}")
    try:
        return await registry.run(definition.name, ctx, build_input(definition.input_type, args))
    finally:
        close_connection()


def main():
    """Parse arguments and run one activity."""
    parser = argparse.ArgumentParser(description="Run a Jira ingestion activity once")
    parser.add_argument("activity", nargs="?", help="Activity name, e.g. jira.FetchAllIssues")
    parser.add_argument("--list", action="store_true", help="List registered activities")
    parser.add_argument("--project", default="", help="Project key (defaults to settings)")
    parser.add_argument("--jql", default="", help="Raw JQL for the search activities")
    parser.add_argument("--issue", default="", help="Issue key for jira.FetchIssue")
    parser.add_argument("--since", default="", help="Only issues updated since (ISO date/time)")
    parser.add_argument("--cursor", default="", help="Resume cursor for fetch-all activities")
    parser.add_argument("--max-results", type=int, default=0, help="Issues per page")
    args = parser.parse_args()

    configure_logging(settings.log_level)

    if args.list or not args.activity:
        for name, definition in build_provider().get_all().items():
            timeout = definition.start_to_close_timeout
            print(f"{name}\t{timeout if timeout else 'default'}")
        return

    if not settings.is_jira_configured():
        logging.warning("Jira is not configured; set JIRA_INGEST_JIRA_BASE_URL, JIRA_INGEST_JIRA_EMAIL and JIRA_INGEST_JIRA_API_TOKEN")

    try:
        output = asyncio.run(run(args))
    except (asyncio.CancelledError, KeyboardInterrupt):
        logging.error("Cancelled")
        sys.exit(130)
    except ActivityError as e:
        logging.error(f"{args.activity} failed: {e}")
        sys.exit(1)
    print(json.dumps(_to_json(output), indent=2))


if __name__ == "__main__":
    main()
