"""Database schema definitions."""

import sqlite3


def create_schema(conn: sqlite3.Connection) -> None:
    """Create database tables and indexes."""

    # One row per store_documents call
    conn.execute("""
        CREATE TABLE IF NOT EXISTS batches (
            batch_id TEXT PRIMARY KEY,
            source TEXT,
            document_count INTEGER NOT NULL,
            created_at REAL NOT NULL
        )
    """)

    # Append-only document storage; the same issue may appear in many batches
    conn.execute("""
        CREATE TABLE IF NOT EXISTS documents (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            batch_id TEXT NOT NULL REFERENCES batches(batch_id),
            position INTEGER NOT NULL,
            doc_id TEXT NOT NULL,
            source TEXT NOT NULL,
            title TEXT,
            content TEXT NOT NULL,
            url TEXT,
            metadata TEXT,
            updated_at TEXT,
            UNIQUE(batch_id, position)
        )
    """)

    conn.execute("CREATE INDEX IF NOT EXISTS idx_documents_batch ON documents(batch_id)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_documents_doc_id ON documents(source, doc_id)")
