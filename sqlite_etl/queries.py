"""
Create, read, update and delete operations against the loaded table.

Each operation takes an open connection and the QueryParams describing the
table and values to use, issues a single SQL statement and returns a short
status message. Database failures surface as StorageError carrying the
SQLite message.
"""
import sqlite3
import logging

import pandas as pd

from .config import QueryParams
from .errors import StorageError
from .storage import quote_identifier

logger = logging.getLogger(__name__)


def create_row(conn: sqlite3.Connection, params: QueryParams) -> str:
    """
    Insert one row built from ``params.create_values``.

    Args:
        conn: SQLite connection
        params: Query parameters

    Returns:
        Status message identifying the inserted row
    """
    columns = list(params.create_values)
    if not columns:
        raise StorageError("No values configured for create")

    column_list = ", ".join(quote_identifier(col) for col in columns)
    placeholders = ", ".join("?" for _ in columns)
    query = (
        f"INSERT INTO {quote_identifier(params.table)} ({column_list}) "
        f"VALUES ({placeholders})"
    )
    try:
        with conn:
            conn.execute(query, [params.create_values[col] for col in columns])
    except sqlite3.Error as e:
        raise StorageError(str(e)) from e

    key = params.create_values.get(params.key_column)
    logger.info(f"Inserted row {params.key_column}={key} into {params.table}")
    return f"Inserted row with {params.key_column}={key} into {params.table}"


def fetch_rows(conn: sqlite3.Connection, params: QueryParams) -> pd.DataFrame:
    """Return up to ``params.read_limit`` rows of the table as a DataFrame."""
    query = f"SELECT * FROM {quote_identifier(params.table)} LIMIT ?"
    try:
        return pd.read_sql(query, conn, params=(params.read_limit,))
    except (sqlite3.Error, pd.errors.DatabaseError) as e:
        raise StorageError(str(e)) from e


def read_rows(conn: sqlite3.Connection, params: QueryParams) -> str:
    df = fetch_rows(conn, params)
    if not df.empty:
        logger.info(f"First rows of {params.table}:\n{df.to_string(index=False)}")
    return f"Read {len(df)} rows from {params.table}"


def update_rows(conn: sqlite3.Connection, params: QueryParams) -> str:
    """
    Set ``update_column`` to ``update_value`` where ``key_column`` equals ``key_value``.

    Matching no rows is not an error.
    """
    query = (
        f"UPDATE {quote_identifier(params.table)} "
        f"SET {quote_identifier(params.update_column)} = ? "
        f"WHERE {quote_identifier(params.key_column)} = ?"
    )
    try:
        with conn:
            cursor = conn.execute(query, (params.update_value, params.key_value))
    except sqlite3.Error as e:
        raise StorageError(str(e)) from e

    logger.info(f"Updated {cursor.rowcount} rows in {params.table}")
    return (
        f"Updated {cursor.rowcount} rows in {params.table} "
        f"where {params.key_column}={params.key_value}"
    )


def delete_rows(conn: sqlite3.Connection, params: QueryParams) -> str:
    """
    Delete rows where ``key_column`` equals ``key_value``.

    Matching no rows is not an error.
    """
    query = (
        f"DELETE FROM {quote_identifier(params.table)} "
        f"WHERE {quote_identifier(params.key_column)} = ?"
    )
    try:
        with conn:
            cursor = conn.execute(query, (params.key_value,))
    except sqlite3.Error as e:
        raise StorageError(str(e)) from e

    logger.info(f"Deleted {cursor.rowcount} rows from {params.table}")
    return (
        f"Deleted {cursor.rowcount} rows from {params.table} "
        f"where {params.key_column}={params.key_value}"
    )
