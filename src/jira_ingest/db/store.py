"""Document storage collaborator backed by SQLite."""

import json
import logging
import sqlite3
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Protocol, Sequence

from ..errors import StorageError
from ..transform.document import EPOCH, Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataRef:
    """Opaque handle to one stored batch of documents."""
    batch_id: str
    count: int
    backend: str = "sqlite"


class DocumentStore(Protocol):
    """Protocol for document storage backends."""

    def store_documents(self, documents: Sequence[Document]) -> DataRef:
        """Append documents as one batch and return a handle to it."""
        ...


class SQLiteDocumentStore:
    """Append-only document store; every call creates a new batch."""

    def __init__(self, conn: sqlite3.Connection):
        """
        Initialize the store.

        Args:
            conn: Connection with the schema already created (see init_db)
        """
        self.conn = conn

    def store_documents(self, documents: Sequence[Document]) -> DataRef:
        """
        Store documents in order as a single batch.

        Args:
            documents: Documents to append

        Returns:
            DataRef for the new batch

        Raises:
            StorageError: The write failed; nothing from the batch is kept
        """
        batch_id = uuid.uuid4().hex
        source = documents[0].source if documents else None

        try:
            with self.conn:
                self.conn.execute(
                    "INSERT INTO batches (batch_id, source, document_count, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (batch_id, source, len(documents), time.time()),
                )
                self.conn.executemany(
                    """
                    INSERT INTO documents (
                        batch_id, position, doc_id, source, title, content,
                        url, metadata, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            batch_id,
                            position,
                            doc.id,
                            doc.source,
                            doc.title,
                            doc.content,
                            doc.url,
                            json.dumps(doc.metadata, sort_keys=True),
                            doc.updated_at.isoformat(),
                        )
                        for position, doc in enumerate(documents)
                    ],
                )
        except sqlite3.Error as e:
            raise StorageError(f"failed to store {len(documents)} documents: {e}") from e

        logger.info(f"Stored {len(documents)} documents in batch {batch_id}")
        return DataRef(batch_id=batch_id, count=len(documents))

    def load_documents(self, ref: DataRef) -> List[Document]:
        """Load the documents of a batch in their original order."""
        try:
            rows = self.conn.execute(
                """
                SELECT doc_id, source, title, content, url, metadata, updated_at
                FROM documents
                WHERE batch_id = ?
                ORDER BY position
                """,
                (ref.batch_id,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"failed to load batch {ref.batch_id}: {e}") from e

        return [
            Document(
                id=row["doc_id"],
                content=row["content"],
                title=row["title"] or "",
                source=row["source"],
                url=row["url"] or "",
                metadata=json.loads(row["metadata"]) if row["metadata"] else {},
                updated_at=(
                    datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else EPOCH
                ),
            )
            for row in rows
        ]
