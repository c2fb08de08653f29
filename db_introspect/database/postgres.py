"""PostgreSQL dialect driver."""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from .base import DialectDriver, QueryClient, RawColumn
from .default_values import DefaultValueParser, PostgresDefaultValueParser
from .models import Index, IntrospectionResult, Relation, Table
from .type_mappers import PostgresTypeMapper, TypeMapper

logger = logging.getLogger(__name__)


SCHEMAS_QUERY = """
    SELECT schema_name
    FROM information_schema.schemata
    ORDER BY schema_name
"""

TABLES_QUERY = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = %(schema)s
      AND table_type = 'BASE TABLE'
    ORDER BY table_name
"""

COLUMNS_QUERY = """
    SELECT
        column_name,
        data_type,
        udt_name,
        is_nullable,
        column_default,
        is_identity,
        ordinal_position
    FROM information_schema.columns
    WHERE table_schema = %(schema)s
      AND table_name = %(table)s
    ORDER BY ordinal_position
"""

COLUMN_COMMENTS_QUERY = """
    SELECT
        a.attname AS column_name,
        pg_catalog.col_description(c.oid, a.attnum) AS column_comment
    FROM pg_catalog.pg_attribute a
    JOIN pg_catalog.pg_class c ON c.oid = a.attrelid
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = %(schema)s
      AND c.relname = %(table)s
      AND a.attnum > 0
      AND NOT a.attisdropped
    ORDER BY a.attnum
"""

TABLE_COMMENT_QUERY = """
    SELECT pg_catalog.obj_description(c.oid, 'pg_class') AS table_comment
    FROM pg_catalog.pg_class c
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = %(schema)s
      AND c.relname = %(table)s
"""

# One row per (index, key entry). indkey positions come back through
# WITH ORDINALITY and entries are grouped in that order, never in the
# order rows happen to arrive. Expression entries (attnum 0) have no
# pg_attribute row and are reported by their expression text.
INDICES_QUERY = """
    SELECT
        t.relname AS table_name,
        i.relname AS index_name,
        COALESCE(a.attname, pg_catalog.pg_get_indexdef(ix.indexrelid, k.ord::int, true)) AS column_name,
        a.attname IS NULL AS is_expression,
        k.ord AS column_position,
        ix.indisunique AS is_unique,
        ix.indisprimary AS is_primary_key,
        ix.indpred IS NOT NULL AS is_partial
    FROM pg_catalog.pg_index ix
    JOIN pg_catalog.pg_class t ON t.oid = ix.indrelid
    JOIN pg_catalog.pg_class i ON i.oid = ix.indexrelid
    JOIN pg_catalog.pg_namespace n ON n.oid = t.relnamespace
    CROSS JOIN LATERAL unnest(ix.indkey::int2[]) WITH ORDINALITY AS k(attnum, ord)
    LEFT JOIN pg_catalog.pg_attribute a ON a.attrelid = t.oid AND a.attnum = k.attnum AND k.attnum > 0
    WHERE t.relkind = 'r'
      AND n.nspname = %(schema)s
      AND t.relname = %(table)s
      AND k.ord <= ix.indnkeyatts
    ORDER BY i.relname, k.ord
"""

RELATIONS_QUERY = """
    SELECT
        con.conname AS constraint_name,
        src.relname AS source_table,
        sa.attname AS source_column,
        tns.nspname AS target_schema,
        tgt.relname AS target_table,
        ta.attname AS target_column,
        cols.ord AS column_position
    FROM pg_catalog.pg_constraint con
    JOIN pg_catalog.pg_class src ON src.oid = con.conrelid
    JOIN pg_catalog.pg_namespace sns ON sns.oid = src.relnamespace
    JOIN pg_catalog.pg_class tgt ON tgt.oid = con.confrelid
    JOIN pg_catalog.pg_namespace tns ON tns.oid = tgt.relnamespace
    CROSS JOIN LATERAL unnest(con.conkey, con.confkey)
        WITH ORDINALITY AS cols(source_attnum, target_attnum, ord)
    JOIN pg_catalog.pg_attribute sa ON sa.attrelid = con.conrelid AND sa.attnum = cols.source_attnum
    JOIN pg_catalog.pg_attribute ta ON ta.attrelid = con.confrelid AND ta.attnum = cols.target_attnum
    WHERE con.contype = 'f'
      AND sns.nspname = %(schema)s
      AND src.relname = %(table)s
    ORDER BY con.conname, cols.ord
"""


class PostgresDriver(DialectDriver):
    """Driver for introspecting PostgreSQL through its system catalogs."""

    name = "postgres"

    RESERVED_PREFIX = "pg_"
    EXCLUDED_SCHEMAS = {"information_schema"}

    # information_schema reports these generically; the real name is in udt_name
    UDT_DATA_TYPES = {"ARRAY", "USER-DEFINED"}

    def __init__(
        self,
        client: QueryClient,
        type_mapper: Optional[TypeMapper] = None,
        default_parser: Optional[DefaultValueParser] = None,
    ):
        super().__init__(
            client,
            type_mapper or PostgresTypeMapper(),
            default_parser or PostgresDefaultValueParser(),
        )

    def is_reserved_schema(self, schema: str) -> bool:
        return schema.startswith(self.RESERVED_PREFIX) or schema in self.EXCLUDED_SCHEMAS

    def get_schemas(self) -> List[str]:
        rows = self._query("schemas", SCHEMAS_QUERY)
        return [row["schema_name"] for row in rows]

    def get_tables(self, schema: str) -> List[str]:
        rows = self._query("tables", TABLES_QUERY, {"schema": schema}, schema=schema)
        return [row["table_name"] for row in rows]

    def get_columns(self, schema: str, table: str) -> List[RawColumn]:
        rows = self._query(
            "columns", COLUMNS_QUERY, {"schema": schema, "table": table}, schema=schema, table=table
        )

        columns = []
        for row in rows:
            data_type = row["data_type"]
            if data_type in self.UDT_DATA_TYPES and row.get("udt_name"):
                data_type = row["udt_name"]
            columns.append(RawColumn(
                name=row["column_name"],
                data_type=data_type,
                is_nullable=(row["is_nullable"] == "YES"),
                default=row["column_default"],
                ordinal_position=row["ordinal_position"],
                is_identity=(row.get("is_identity") == "YES"),
            ))
        return sorted(columns, key=lambda c: c.ordinal_position)

    def get_column_comments(self, schema: str, table: str) -> Dict[str, Optional[str]]:
        rows = self._query(
            "column comments", COLUMN_COMMENTS_QUERY, {"schema": schema, "table": table},
            schema=schema, table=table,
        )
        return {row["column_name"]: row["column_comment"] for row in rows}

    def get_table_comment(self, schema: str, table: str) -> Optional[str]:
        rows = self._query(
            "table comment", TABLE_COMMENT_QUERY, {"schema": schema, "table": table},
            schema=schema, table=table,
        )
        if not rows:
            return None
        return rows[0]["table_comment"]

    def get_indices(self, schema: str, table: str) -> List[Index]:
        rows = self._query(
            "indices", INDICES_QUERY, {"schema": schema, "table": table}, schema=schema, table=table
        )
        return group_index_rows(rows)

    def get_relations(self, schema: str, table: str) -> List[Relation]:
        rows = self._query(
            "relations", RELATIONS_QUERY, {"schema": schema, "table": table}, schema=schema, table=table
        )
        rows = sorted(rows, key=lambda r: (r["constraint_name"], r.get("column_position") or 0))
        return [
            Relation(
                source_table=row["source_table"],
                source_column=row["source_column"],
                target_table=row["target_table"],
                target_column=row["target_column"],
                constraint_name=row["constraint_name"],
                target_schema=row.get("target_schema"),
            )
            for row in rows
        ]

    def finalize(self, schema: str, tables: Sequence[Table], relations: Sequence[Relation]) -> IntrospectionResult:
        """Deduplicate relations and resolve one-to-one relations.

        A relation is one-to-one when its source column alone is unique or
        the sole primary key column of the source table.
        """
        tables_by_name = {t.name: t for t in tables}

        seen = set()
        resolved = []
        for relation in relations:
            key = (
                relation.source_table, relation.source_column,
                relation.target_table, relation.target_column,
                relation.constraint_name,
            )
            if key in seen:
                continue
            seen.add(key)

            source = tables_by_name.get(relation.source_table)
            column = source.get_column(relation.source_column) if source else None
            if column is not None and (column.is_unique or source.primary_key_columns == [column.name]):
                relation = replace(relation, relationship_type="one_to_one")
            resolved.append(relation)

        resolved.sort(key=lambda r: (r.source_table, r.constraint_name or "", r.source_column))

        external = {r.target_table for r in resolved if r.target_schema not in (None, schema)}
        if external:
            logger.debug("Relations in %s reference tables outside the schema: %s", schema, sorted(external))

        return IntrospectionResult(
            schema=schema,
            dialect=self.name,
            tables=tuple(tables),
            relations=tuple(resolved),
        )


def group_index_rows(rows) -> List[Index]:
    """Aggregate per-entry index rows into Index objects.

    Rows are grouped by (table, index) and the fields of each index are
    ordered by column_position, so composite indices keep catalog order
    however the rows were ordered or split. A repeated row for the same
    position is counted once.
    """
    groups: Dict[Tuple[str, str], dict] = {}
    for row in rows:
        key = (row["table_name"], row["index_name"])
        group = groups.setdefault(key, {
            "entries": {},
            "unique": bool(row["is_unique"]),
            "is_primary_key": bool(row["is_primary_key"]),
            "is_partial": bool(row.get("is_partial")),
            "has_expressions": False,
        })
        group["entries"][row["column_position"]] = row["column_name"]
        if row.get("is_expression"):
            group["has_expressions"] = True

    indices = []
    for (table_name, index_name), group in groups.items():
        entries = group["entries"]
        indices.append(Index(
            name=index_name,
            table_name=table_name,
            fields=tuple(entries[position] for position in sorted(entries)),
            unique=group["unique"],
            is_primary_key=group["is_primary_key"],
            has_expressions=group["has_expressions"],
            is_partial=group["is_partial"],
        ))

    return sorted(indices, key=lambda i: (i.table_name, i.name))
