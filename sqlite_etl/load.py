import csv
import sqlite3
import logging
from typing import List, Tuple

import pandas as pd

from .errors import ParseError, StorageError
from .storage import connect, quote_identifier, table_exists

logger = logging.getLogger(__name__)


def read_csv_rows(file_path: str) -> Tuple[List[str], List[List[str]]]:
    """
    Read and validate a delimited file with a header row.

    Args:
        file_path: Path to the CSV file

    Returns:
        Tuple of (header, rows); every row has as many fields as the header
    """
    try:
        with open(file_path, newline='', encoding='utf-8') as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if not header:
                raise ParseError(f"{file_path} is empty or has no header row")

            header = [name.strip() for name in header]
            if any(not name for name in header):
                raise ParseError(f"{file_path} has a blank column name in its header")
            # SQLite column names are case-insensitive
            folded = [name.lower() for name in header]
            duplicates = sorted({name for name in header if folded.count(name.lower()) > 1})
            if duplicates:
                raise ParseError(f"{file_path} has duplicate columns: {duplicates}")

            rows = []
            for row in reader:
                if not row:
                    continue
                if len(row) != len(header):
                    raise ParseError(
                        f"Malformed row at line {reader.line_num} of {file_path}: "
                        f"expected {len(header)} fields, found {len(row)}"
                    )
                rows.append(row)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise ParseError(f"Cannot read {file_path}: {e}") from e

    return header, rows


def create_table(cursor: sqlite3.Cursor, table: str, columns: List[str]) -> None:
    """
    Create the destination table if it doesn't already exist, every column as TEXT.
    """
    column_defs = ", ".join(f"{quote_identifier(col)} TEXT" for col in columns)
    cursor.execute(f"CREATE TABLE IF NOT EXISTS {quote_identifier(table)} ({column_defs})")


def load(file_path: str, db_path: str, table: str, replace: bool = False) -> str:
    """
    Load a CSV file into a SQLite table.

    Rows are appended, so loading the same file twice stores every row twice
    unless ``replace`` is set, in which case the table is dropped and rebuilt.

    Args:
        file_path: Path to a previously extracted CSV file
        db_path: Path to the SQLite database file
        table: Destination table name
        replace: Drop any existing table before loading

    Returns:
        Status message with the number of rows loaded
    """
    header, rows = read_csv_rows(file_path)
    logger.info(f"Read {len(rows)} rows with {len(header)} columns from {file_path}")

    df = pd.DataFrame(rows, columns=header, dtype=str)

    with connect(db_path) as conn:
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN TRANSACTION")
            if replace:
                cursor.execute(f"DROP TABLE IF EXISTS {quote_identifier(table)}")
            is_new = not table_exists(conn, table)
            create_table(cursor, table, header)
            df.to_sql(table, conn, if_exists='append', index=False)
            conn.commit()
        except (sqlite3.Error, pd.errors.DatabaseError) as e:
            conn.rollback()
            raise StorageError(f"Failed to load {file_path} into {table}: {e}") from e

    if is_new:
        logger.info(f"Created table {table} with columns: {header}")
    else:
        logger.info(f"Appended to existing table {table}")

    logger.info(f"Successfully loaded {len(rows)} records into {table}")
    return f"Loaded {len(rows)} rows into {table}"
