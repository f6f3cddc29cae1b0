"""Transform module initialization."""

from .document import EPOCH, SOURCE, Document, issue_to_document, parse_jira_timestamp

__all__ = ["Document", "EPOCH", "SOURCE", "issue_to_document", "parse_jira_timestamp"]
