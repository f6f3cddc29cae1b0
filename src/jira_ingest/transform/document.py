"""Canonical document shape and the issue-to-document transform."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict

from ..upstream.base import Issue

SOURCE = "jira"

# Jira timestamp layout, e.g. "2024-01-29T14:30:45.123+0000"
JIRA_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

# Zero value for updated_at when Jira's timestamp is missing or unparseable
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Document:
    """Normalized, source-agnostic document ready for storage."""
    id: str
    content: str
    title: str
    source: str
    url: str
    metadata: Dict[str, str] = field(default_factory=dict)
    updated_at: datetime = EPOCH


def issue_to_document(issue: Issue) -> Document:
    """
    Convert a Jira issue to a Document.

    Content is the summary, then the description, then one
    ``[Comment by <name>]: <body>`` block per comment in order, each separated
    by a blank line. Optional fields that are absent are left out of the
    metadata rather than stored as empty strings.

    Args:
        issue: Parsed Jira issue

    Returns:
        Document for the issue
    """
    fields = issue.fields

    content = fields.summary
    if fields.description:
        content += "\n\n" + fields.description
    for comment in fields.comments:
        content += f"\n\n[Comment by {comment.author.display_name}]: {comment.body}"

    metadata = {
        "issue_key": issue.key,
        "project": fields.project.key,
        "status": fields.status.name,
        "issue_type": fields.issue_type.name,
    }
    if fields.priority is not None:
        metadata["priority"] = fields.priority.name
    if fields.assignee is not None:
        metadata["assignee"] = fields.assignee.display_name
    if fields.reporter is not None:
        metadata["reporter"] = fields.reporter.display_name
    if fields.labels:
        metadata["labels"] = ",".join(fields.labels)

    return Document(
        id=issue.key,
        content=content,
        title=fields.summary,
        source=SOURCE,
        url=issue.self_url,
        metadata=metadata,
        updated_at=parse_jira_timestamp(fields.updated),
    )


def parse_jira_timestamp(value: str) -> datetime:
    """Parse a Jira timestamp, returning EPOCH when it is empty or malformed."""
    if not value:
        return EPOCH
    try:
        return datetime.strptime(value, JIRA_TIME_FORMAT)
    except ValueError:
        return EPOCH
