"""Shared pytest fixtures for db-introspect tests."""

import pytest

from db_introspect.database import PostgresDriver
from tests.fixtures import create_postgres_client, column_row, index_rows, relation_row


@pytest.fixture
def shop_catalog():
    """Catalog rows for a small shop schema with users, orders and tags."""
    return {
        "users": {
            "comment": "Registered customers",
            "columns": [
                column_row("id", "uuid", 1, nullable=False, default="gen_random_uuid()"),
                column_row("email", "character varying", 2, nullable=False),
                column_row("status", "character varying", 3, default="'active'::character varying"),
                column_row("created_at", "timestamp with time zone", 4, default="now()"),
                column_row("settings", "jsonb", 5),
            ],
            "comments": [
                {"column_name": "id", "column_comment": None},
                {"column_name": "email", "column_comment": "Login address"},
                {"column_name": "status", "column_comment": None},
                {"column_name": "created_at", "column_comment": None},
                {"column_name": "settings", "column_comment": None},
            ],
            "indices": (
                index_rows("users", "users_pkey", ["id"], primary=True)
                + index_rows("users", "users_email_key", ["email"], unique=True)
            ),
        },
        "orders": {
            "columns": [
                column_row("id", "integer", 1, nullable=False, default="nextval('orders_id_seq'::regclass)"),
                column_row("user_id", "uuid", 2, nullable=False),
                column_row("total", "numeric", 3, default="0"),
                column_row("note", "text", 4, default="NULL::text"),
                column_row("shipped", "boolean", 5, default="false"),
            ],
            "indices": (
                index_rows("orders", "orders_pkey", ["id"], primary=True)
                + index_rows("orders", "orders_user_id_idx", ["user_id"])
            ),
            "relations": [
                relation_row("orders_user_id_fkey", "orders", "user_id", "users", "id"),
            ],
        },
        "tags": {
            "columns": [
                column_row("order_id", "integer", 1, nullable=False),
                column_row("label", "text", 2, nullable=False),
                column_row("position", "point", 3),
            ],
            "indices": index_rows("tags", "tags_label_order_id_key", ["label", "order_id"], unique=True),
            "relations": [
                relation_row("tags_order_id_fkey", "tags", "order_id", "orders", "id"),
            ],
        },
    }


@pytest.fixture
def shop_client(shop_catalog):
    """FakeClient serving the shop catalog."""
    return create_postgres_client(shop_catalog, schemas=["information_schema", "pg_catalog", "pg_toast", "public", "sales"])


@pytest.fixture
def postgres_driver(shop_client):
    """PostgresDriver bound to the shop catalog."""
    return PostgresDriver(shop_client)
