"""SQLite connection and identifier helpers shared by the loader and query operations."""
import os
import sqlite3
import logging
from contextlib import contextmanager
from typing import Iterator

from .errors import StorageError

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    """
    Quote a table or column name for use in SQL text.

    Args:
        name: Identifier as it appears in the CSV header or configuration

    Returns:
        Double-quoted identifier with embedded quotes escaped
    """
    if "\x00" in name:
        raise StorageError(f"Invalid identifier: {name!r}")
    return '"' + name.replace('"', '""') + '"'


@contextmanager
def connect(db_path: str) -> Iterator[sqlite3.Connection]:
    """
    Open a connection to the SQLite database and close it on exit.

    Args:
        db_path: Path to the SQLite database file

    Yields:
        SQLite connection object
    """
    directory = os.path.dirname(db_path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = sqlite3.connect(db_path)
        logger.debug(f"Connected to database: {db_path}")
    except (OSError, sqlite3.Error) as e:
        raise StorageError(f"Cannot open database {db_path}: {e}") from e

    try:
        yield conn
    finally:
        conn.close()


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    # Table names compare case-insensitively in SQLite
    cursor = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ? COLLATE NOCASE",
        (table,),
    )
    return cursor.fetchone() is not None
