"""Tests for the dialect registry."""

import pytest

from db_introspect.database import PostgresDriver
from db_introspect.errors import UnknownDialectError
from db_introspect.registry import DialectRegistry, default_registry
from tests.fixtures import FakeClient


class TestDialectRegistry:

    def test_default_registry_has_postgres(self):
        registry = default_registry()

        assert "postgres" in registry
        assert "PostgreSQL" in registry
        assert registry.names() == ["postgres", "postgresql"]

    def test_create_binds_client(self):
        client = FakeClient()
        driver = default_registry().create("postgres", client)

        assert isinstance(driver, PostgresDriver)
        assert driver.client is client

    def test_registries_are_independent(self):
        first = default_registry()
        second = default_registry()
        first.register("custom", PostgresDriver)

        assert "custom" in first
        assert "custom" not in second

    def test_unknown_dialect(self):
        registry = DialectRegistry()

        with pytest.raises(UnknownDialectError) as exc_info:
            registry.create("mysql", FakeClient())

        assert exc_info.value.code == "UNKNOWN_DIALECT"
        assert exc_info.value.details["dialect"] == "mysql"
