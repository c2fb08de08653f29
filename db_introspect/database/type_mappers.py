"""Database-specific type mapping strategies."""

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Optional

from .models import TypeIdentifier, TypeMapping


class TypeMapper(ABC):
    """Abstract base class for database type mapping.

    Implementations must never raise for an unknown type. They return a
    TypeMapping without identifier instead, so a single odd column does not
    abort introspection of the whole schema.
    """

    # Raw type name -> canonical identifier
    TYPE_MAP: Dict[str, TypeIdentifier] = {}

    # Raw types that become identifier types when used as primary key
    ID_CAPABLE_TYPES: FrozenSet[str] = frozenset()

    def map_type(self, raw_type: Optional[str], column_name: str, is_primary_key: bool) -> TypeMapping:
        """Convert a raw database type to a canonical type identifier.

        Args:
            raw_type: Type name as reported by the catalog
            column_name: Column the type belongs to
            is_primary_key: Whether the column is part of the primary key

        Returns:
            TypeMapping with either an identifier or an error/comment pair
        """
        type_name = self.normalize_type_name(raw_type)

        if is_primary_key and type_name in self.ID_CAPABLE_TYPES:
            return TypeMapping(identifier=self.primary_key_identifier(type_name))

        identifier = self.TYPE_MAP.get(type_name)
        if identifier is not None:
            return TypeMapping(identifier=identifier)

        return self.unsupported(raw_type, column_name)

    def normalize_type_name(self, raw_type: Optional[str]) -> str:
        """Canonical lookup key for a raw type name."""
        return (raw_type or "").strip().lower()

    @abstractmethod
    def primary_key_identifier(self, type_name: str) -> TypeIdentifier:
        """Identifier for an ID-capable type used as primary key."""
        pass

    def unsupported(self, raw_type: Optional[str], column_name: str) -> TypeMapping:
        return TypeMapping(
            identifier=None,
            comment=f"Type '{raw_type}' is not yet supported.",
            error=f"Not able to handle type '{raw_type}'",
        )


class PostgresTypeMapper(TypeMapper):
    """Type mapper for PostgreSQL types as reported by information_schema.

    Integer widths (smallint, integer, bigint) all collapse to Int, so the
    canonical model loses the distinction between them.
    """

    TYPE_MAP = {
        "uuid": TypeIdentifier.UUID,
        # String types
        "character": TypeIdentifier.STRING,
        "character varying": TypeIdentifier.STRING,
        "text": TypeIdentifier.STRING,
        # Integer types
        "smallint": TypeIdentifier.INT,
        "integer": TypeIdentifier.INT,
        "bigint": TypeIdentifier.INT,
        # Floating point types
        "real": TypeIdentifier.FLOAT,
        "double precision": TypeIdentifier.FLOAT,
        "numeric": TypeIdentifier.FLOAT,
        "boolean": TypeIdentifier.BOOLEAN,
        # Date/Time types
        "timestamp": TypeIdentifier.DATE_TIME,
        "timestamp without time zone": TypeIdentifier.DATE_TIME,
        "timestamp with time zone": TypeIdentifier.DATE_TIME,
        "date": TypeIdentifier.DATE_TIME,
        "json": TypeIdentifier.JSON,
        "jsonb": TypeIdentifier.JSON,
    }

    ID_CAPABLE_TYPES = frozenset({"character", "character varying", "text", "uuid"})

    def primary_key_identifier(self, type_name: str) -> TypeIdentifier:
        if type_name == "uuid":
            return TypeIdentifier.UUID
        return TypeIdentifier.ID
