"""Query clients wrapping database connections."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConnectionError, UnknownDialectError

logger = logging.getLogger(__name__)


class PostgresClient:
    """Client exposing execute(sql, params) -> rows over a psycopg2 connection.

    Rows are returned as dicts keyed by column name. The connection is put
    into autocommit so a failed catalog query does not leave an aborted
    transaction behind.
    """

    def __init__(self, connection):
        self._connection = connection
        self._connection.autocommit = True

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        from psycopg2.extras import RealDictCursor

        with self._connection.cursor(cursor_factory=RealDictCursor) as cursor:
            cursor.execute(sql, params)
            return [dict(row) for row in cursor.fetchall()]

    def close(self):
        """Close the underlying connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def connect_postgres(url: str) -> PostgresClient:
    """Open a PostgreSQL connection for introspection.

    Args:
        url: libpq connection string or postgresql:// URL

    Raises:
        ConnectionError: If the server cannot be reached or rejects the login
    """
    try:
        import psycopg2
    except ImportError:
        raise ImportError(
            "psycopg2 is required for PostgreSQL connections. "
            "Install it with: pip install psycopg2-binary"
        )

    try:
        connection = psycopg2.connect(url)
    except psycopg2.Error as e:
        raise ConnectionError(
            f"Could not connect to PostgreSQL: {e}".strip(),
            details={"dialect": "postgres"},
        ) from e

    logger.debug("Opened PostgreSQL connection")
    return PostgresClient(connection)


def open_client(dialect: str, url: str):
    """Open a client for the given dialect."""
    if dialect.lower() in ("postgres", "postgresql"):
        return connect_postgres(url)
    raise UnknownDialectError(dialect, available=["postgres", "postgresql"])
