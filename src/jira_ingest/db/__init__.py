"""Database module initialization."""

from .connection import close_connection, connect, get_connection, init_db
from .store import DataRef, DocumentStore, SQLiteDocumentStore

__all__ = [
    "DataRef",
    "DocumentStore",
    "SQLiteDocumentStore",
    "close_connection",
    "connect",
    "get_connection",
    "init_db",
]
