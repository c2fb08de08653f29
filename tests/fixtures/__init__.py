"""Test fixtures package."""

from .fake_client import FakeClient, create_postgres_client, column_row, index_rows, relation_row

__all__ = [
    "FakeClient",
    "create_postgres_client",
    "column_row",
    "index_rows",
    "relation_row",
]
