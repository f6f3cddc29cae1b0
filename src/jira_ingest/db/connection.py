"""SQLite database connection for the document store."""

import sqlite3
from pathlib import Path
from typing import Optional, Union

from ..config import settings


_connection: Optional[sqlite3.Connection] = None


def connect(db_path: Union[str, Path]) -> sqlite3.Connection:
    """Open a connection with row access by column name."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_connection() -> sqlite3.Connection:
    """Get or create the database connection."""
    global _connection

    if _connection is None:
        _connection = connect(settings.db_path)

    return _connection


def init_db(conn: Optional[sqlite3.Connection] = None) -> sqlite3.Connection:
    """Initialize the database schema."""
    from .schema import create_schema

    conn = conn or get_connection()
    create_schema(conn)
    conn.commit()
    return conn


def close_connection() -> None:
    """Close the database connection."""
    global _connection
    if _connection is not None:
        _connection.close()
        _connection = None
