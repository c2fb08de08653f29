"""Tests for Postgres default value normalization."""

import pytest

from db_introspect.database.default_values import AUTO_INCREMENT, PostgresDefaultValueParser


@pytest.fixture
def parser():
    return PostgresDefaultValueParser()


class TestPostgresDefaults:

    def test_none(self, parser):
        assert parser.parse(None) is None

    def test_sequence(self, parser):
        assert parser.parse("nextval('seq')") == "[AUTO INCREMENT]"
        assert parser.parse("nextval('orders_id_seq'::regclass)") == AUTO_INCREMENT

    @pytest.mark.parametrize("raw", [
        "now()",
        "'now'::text",
        "CURRENT_TIMESTAMP",
        "(now() AT TIME ZONE 'utc')",
        "LOCALTIMESTAMP",
        "LOCALTIME",
        "CURRENT_DATE",
        "CURRENT_TIME",
        "clock_timestamp()",
        "statement_timestamp()",
        "transaction_timestamp()",
    ])
    def test_current_timestamp(self, parser, raw):
        assert parser.parse(raw) is None

    def test_casted_string_literal(self, parser):
        assert parser.parse("'active'::character varying") == "active"

    def test_casted_null(self, parser):
        assert parser.parse("NULL::integer") is None

    def test_casted_number(self, parser):
        assert parser.parse("'42'::bigint") == "42"
        assert parser.parse("0::numeric") == "0"

    def test_plain_values_unchanged(self, parser):
        assert parser.parse("false") == "false"
        assert parser.parse("0") == "0"
        assert parser.parse("gen_random_uuid()") == "gen_random_uuid()"

    def test_cast_suffix_stripped_from_the_right(self, parser):
        assert parser.parse("'a::b'::text") == "a::b"
