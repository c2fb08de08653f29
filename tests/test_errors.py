"""Tests for the error taxonomy."""

from db_introspect.errors import ConnectionError, IntrospectionError, QueryFailure


class TestQueryFailure:

    def test_message_names_step_and_table(self):
        error = QueryFailure(step="columns", dialect="postgres", schema="public", table="users",
                             cause=RuntimeError("timeout"))

        assert error.message == "Failed to query columns for public.users: timeout"
        assert str(error) == error.message
        assert isinstance(error, IntrospectionError)

    def test_message_without_table(self):
        error = QueryFailure(step="schemas", dialect="postgres")

        assert error.message == "Failed to query schemas"

    def test_to_dict(self):
        error = QueryFailure(step="indices", dialect="postgres", schema="public", table="orders")

        assert error.to_dict() == {
            "code": "QUERY_FAILURE",
            "message": "Failed to query indices for public.orders",
            "details": {
                "dialect": "postgres",
                "step": "indices",
                "schema": "public",
                "table": "orders",
            },
        }


class TestConnectionError:

    def test_code(self):
        error = ConnectionError("refused")

        assert error.code == "CONNECTION_ERROR"
        assert error.details == {}
