"""Per-invocation execution context handed to every activity."""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

import httpx

from ..db.store import DocumentStore


@dataclass
class ActivityContext:
    """
    What the orchestration runtime supplies to one activity invocation.

    Attributes:
        store: Storage collaborator that receives normalized documents
        name: Registered name of the running activity (set by the registry)
        cancel_event: Set by the runtime to stop a fetch-all run between pages
        transport: Optional httpx transport for every client the activity opens
        max_pages: Page bound for fetch-all runs (None means unbounded)
    """
    store: DocumentStore
    name: str = ""
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event)
    transport: Optional[httpx.AsyncBaseTransport] = None
    max_pages: Optional[int] = None

    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        self.cancel_event.set()
