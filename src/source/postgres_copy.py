"""PostgreSQL table source using ``COPY ... TO STDOUT``.

This module streams a table as CSV text with a header row. The
connection is owned by the source and released through ``close``.
"""

from __future__ import annotations

from typing import Any, Iterator, Protocol

from core.errors import TablecastDependencyError, TablecastSourceError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)

_COPY_TEMPLATE = "COPY {} TO STDOUT WITH (FORMAT csv, HEADER)"


class RowSource(Protocol):
    """Readable CSV byte stream whose first record is a header."""

    def iter_chunks(self) -> Iterator[bytes]: ...

    def close(self) -> None: ...


class PostgresCopySource:
    """Stream one table through a psycopg ``COPY TO STDOUT`` session."""

    def __init__(self, connection: Any, table_name: str) -> None:
        self._connection = connection
        self._table_name = table_name
        self._closed = False

    @property
    def table_name(self) -> str:
        return self._table_name

    def iter_chunks(self) -> Iterator[bytes]:
        """Yield raw CSV chunks as the server sends them.

        Yields:
            Non-empty byte chunks in stream order.
        """
        statement = build_copy_statement(self._table_name)
        _LOGGER.info("postgres_copy_started", table=self._table_name)
        with self._connection.cursor() as cursor:
            with cursor.copy(statement) as copy:
                for data in copy:
                    if data:
                        yield bytes(data)
        _LOGGER.info("postgres_copy_finished", table=self._table_name)

    def close(self) -> None:
        """Close the underlying connection."""
        if self._closed:
            return
        self._closed = True
        self._connection.close()


def open_postgres_source(database_url: str, table_name: str) -> PostgresCopySource:
    """Connect to PostgreSQL and build a table source.

    Args:
        database_url: psycopg conninfo string or URL; empty uses libpq PG* vars.
        table_name: Table to export, optionally ``schema.table``.

    Returns:
        Connected table source.

    Raises:
        TablecastDependencyError: If psycopg is missing.
        TablecastSourceError: If the connection cannot be opened.
    """
    try:
        import psycopg
    except ImportError as error:
        raise TablecastDependencyError(
            "PostgreSQL export requires psycopg, but it is not installed. "
            "Install psycopg to stream tables."
        ) from error
    build_copy_statement(table_name)
    try:
        connection = psycopg.connect(database_url)
    except psycopg.Error as error:
        raise TablecastSourceError(
            f"Failed to connect to PostgreSQL for table {table_name}: {error}. "
            "Check TABLECAST_DATABASE_URL or PG* environment variables."
        ) from error
    return PostgresCopySource(connection, table_name)


def build_copy_statement(table_name: str) -> Any:
    """Build a safely quoted ``COPY`` statement for a table.

    Args:
        table_name: ``table`` or ``schema.table``.

    Returns:
        psycopg composed SQL statement.

    Raises:
        TablecastSourceError: If the table name is empty or malformed.
    """
    parts = table_name.split(".")
    if not table_name or len(parts) > 2 or not all(parts):
        raise TablecastSourceError(
            f"Invalid table name '{table_name}': expected 'table' or 'schema.table'."
        )
    from psycopg import sql

    return sql.SQL(_COPY_TEMPLATE).format(sql.Identifier(*parts))
