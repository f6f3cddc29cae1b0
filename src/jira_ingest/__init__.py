"""Jira issue ingestion activities."""

__version__ = "1.0.0"
