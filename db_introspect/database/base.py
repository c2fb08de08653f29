"""Abstract base class for dialect drivers."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from ..errors import QueryFailure
from .default_values import AUTO_INCREMENT, DefaultValueParser
from .models import Index, IntrospectionResult, Relation, Table, TypeMapping
from .type_mappers import TypeMapper

logger = logging.getLogger(__name__)


class QueryClient(Protocol):
    """Connected client handle supplied by the caller."""

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Mapping[str, Any]]:
        ...


@dataclass(frozen=True)
class RawColumn:
    """Column row as reported by the catalog, before mapping."""
    name: str
    data_type: str
    is_nullable: bool
    default: Optional[str]
    ordinal_position: int
    is_identity: bool = False


class DialectDriver(ABC):
    """Binds catalog queries, type mapping and default parsing to one engine.

    Subclasses implement the catalog queries. Type mapping and default
    normalization are delegated to the injected TypeMapper and
    DefaultValueParser.
    """

    name: str = "generic"

    def __init__(self, client: QueryClient, type_mapper: TypeMapper, default_parser: DefaultValueParser):
        self.client = client
        self.type_mapper = type_mapper
        self.default_parser = default_parser

    def _query(
        self,
        step: str,
        sql: str,
        params: Optional[Mapping[str, Any]] = None,
        schema: Optional[str] = None,
        table: Optional[str] = None,
    ) -> List[Mapping[str, Any]]:
        """Execute a catalog query, converting any failure into QueryFailure."""
        logger.debug("Querying %s (schema=%s, table=%s)", step, schema, table)
        try:
            return list(self.client.execute(sql, params))
        except Exception as e:
            raise QueryFailure(step=step, dialect=self.name, schema=schema, table=table, cause=e) from e

    @abstractmethod
    def get_schemas(self) -> List[str]:
        """Get all schema names, including reserved ones."""
        pass

    @abstractmethod
    def is_reserved_schema(self, schema: str) -> bool:
        """Whether the schema is internal to the engine."""
        pass

    @abstractmethod
    def get_tables(self, schema: str) -> List[str]:
        """Get all base tables in a schema."""
        pass

    @abstractmethod
    def get_columns(self, schema: str, table: str) -> List[RawColumn]:
        """Get raw columns for a table in ordinal order."""
        pass

    @abstractmethod
    def get_column_comments(self, schema: str, table: str) -> Dict[str, Optional[str]]:
        """Get column name -> comment for a table; missing comments are None."""
        pass

    @abstractmethod
    def get_table_comment(self, schema: str, table: str) -> Optional[str]:
        """Get the descriptive comment of a table, if any."""
        pass

    @abstractmethod
    def get_indices(self, schema: str, table: str) -> List[Index]:
        """Get indices of a table with fields in catalog order."""
        pass

    @abstractmethod
    def get_relations(self, schema: str, table: str) -> List[Relation]:
        """Get foreign-key column pairs originating from a table."""
        pass

    def map_type(self, raw_type: str, column_name: str, is_primary_key: bool) -> TypeMapping:
        return self.type_mapper.map_type(raw_type, column_name, is_primary_key)

    def normalize_default(self, raw: Optional[str]) -> Optional[str]:
        return self.default_parser.parse(raw)

    def column_default(self, column: RawColumn) -> Optional[str]:
        """Normalized default of a catalog column; identity columns auto-increment."""
        if column.is_identity:
            return AUTO_INCREMENT
        return self.normalize_default(column.default)

    def finalize(self, schema: str, tables: Sequence[Table], relations: Sequence[Relation]) -> IntrospectionResult:
        """Post-process accumulated tables and relations into the result.

        Runs in memory only. Dialects override this to resolve
        engine-specific details of the assembled result.
        """
        return IntrospectionResult(
            schema=schema,
            dialect=self.name,
            tables=tuple(tables),
            relations=tuple(relations),
        )
