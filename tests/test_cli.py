"""Tests for the db-introspect command line."""

import json

import pytest
from typer.testing import CliRunner

from db_introspect.config import settings
from db_introspect.main import app
from tests.fixtures import FakeClient

runner = CliRunner()


@pytest.fixture
def patched_client(monkeypatch, shop_client):
    """Route every connection opened by the CLI to the shop catalog."""
    opened = []

    def fake_open_client(dialect, url):
        opened.append((dialect, url))
        return shop_client

    monkeypatch.setattr("db_introspect.main.open_client", fake_open_client)
    return opened


class TestSchemasCommand:

    def test_lists_user_schemas(self, patched_client):
        result = runner.invoke(app, ["schemas", "--url", "postgresql://localhost/shop"])

        assert result.exit_code == 0
        assert "public" in result.output
        assert "sales" in result.output
        assert "pg_catalog" not in result.output
        assert patched_client == [("postgres", "postgresql://localhost/shop")]

    def test_missing_url(self, monkeypatch):
        monkeypatch.setattr(settings, "database_url", None)
        result = runner.invoke(app, ["schemas"])

        assert result.exit_code == 1
        assert "No database URL" in result.output


class TestInspectCommand:

    def test_table_summary(self, patched_client):
        result = runner.invoke(app, ["inspect", "public", "--url", "postgresql://localhost/shop"])

        assert result.exit_code == 0
        assert "orders" in result.output
        assert "users" in result.output
        assert "tags.position" in result.output

    def test_writes_json_output(self, patched_client, tmp_path):
        output = tmp_path / "public.json"
        result = runner.invoke(app, [
            "inspect", "public", "--url", "postgresql://localhost/shop", "--output", str(output),
        ])

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data["schema"] == "public"
        assert [t["name"] for t in data["tables"]] == ["orders", "tags", "users"]

        tags = data["tables"][1]
        assert tags["indices"][0]["fields"] == ["label", "order_id"]
        position = tags["columns"][2]
        assert position["type_identifier"] is None
        assert position["type_error"] == "Not able to handle type 'point'"

        users = data["tables"][2]
        assert users["columns"][0]["type_identifier"] == "Uuid"

    def test_parallel_workers(self, patched_client, tmp_path):
        output = tmp_path / "public.json"
        result = runner.invoke(app, [
            "inspect", "public", "--url", "postgresql://localhost/shop", "--workers", "2", "-o", str(output),
        ])

        assert result.exit_code == 0
        assert len(json.loads(output.read_text())["tables"]) == 3
        assert len(patched_client) >= 2

    def test_query_failure_exits_with_error(self, monkeypatch):
        client = FakeClient()
        client.add_response(r"information_schema\.tables", RuntimeError("permission denied"))
        monkeypatch.setattr("db_introspect.main.open_client", lambda dialect, url: client)

        result = runner.invoke(app, ["inspect", "secret", "--url", "postgresql://localhost/shop"])

        assert result.exit_code == 1
        assert "permission denied" in result.output
        assert client.closed

    def test_unknown_dialect(self, patched_client):
        result = runner.invoke(app, ["inspect", "--url", "x://", "--dialect", "oracle"])

        assert result.exit_code == 1
        assert "Unknown dialect: oracle" in result.output


class TestConfigCommand:

    def test_shows_settings(self):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Default Schema" in result.output
