"""Error types raised by the Jira client, pagination engine and activities."""

from typing import Any, List


class JiraIngestError(Exception):
    """Base class for all jira-ingest errors."""


class RequestError(JiraIngestError):
    """The request could not be built (bad base URL, bad scheme)."""


class TransportError(JiraIngestError):
    """The request failed on the network before a response arrived."""


class DecodeError(JiraIngestError):
    """The response body was not the JSON we expected."""


class JiraAPIError(JiraIngestError):
    """Jira answered with a non-success status code."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"jira API error: status={status_code} body={body}")


class CursorError(JiraIngestError):
    """A pagination cursor did not decode to a start offset."""


class PaginationCancelled(JiraIngestError):
    """Cancellation was requested between pages.

    Carries what was accumulated so far and the cursor to resume from, so a
    caller can persist the cursor. The partial items are never reported as a
    successful result.
    """

    def __init__(self, items: List[Any], page_count: int, cursor: str):
        self.items = items
        self.page_count = page_count
        self.cursor = cursor
        super().__init__(
            f"pagination cancelled after {page_count} pages "
            f"({len(items)} items, resume cursor={cursor!r})"
        )


class PaginationLimitError(JiraIngestError):
    """The run hit its page bound before the dataset was exhausted."""

    def __init__(self, max_pages: int, cursor: str):
        self.max_pages = max_pages
        self.cursor = cursor
        super().__init__(
            f"pagination exceeded {max_pages} pages (resume cursor={cursor!r})"
        )


class StorageError(JiraIngestError):
    """The document store rejected a write or read."""


class ActivityError(JiraIngestError):
    """An activity failed at a named stage.

    The message reads ``"<stage>: <cause>"`` and the cause is chained, so
    ``err.cause`` and ``err.__cause__`` both reach the original exception.
    """

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage}: {cause}")
