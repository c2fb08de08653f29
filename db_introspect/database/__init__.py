"""Database introspection module for db-introspect.

This module provides dialect-agnostic models and driver contracts
with a specific implementation for PostgreSQL.
"""

from .models import (
    TypeIdentifier,
    TypeMapping,
    Column,
    Index,
    Relation,
    Table,
    IntrospectionResult,
)
from .base import DialectDriver, QueryClient, RawColumn
from .type_mappers import TypeMapper, PostgresTypeMapper
from .default_values import AUTO_INCREMENT, DefaultValueParser, PostgresDefaultValueParser
from .postgres import PostgresDriver

__all__ = [
    # Data models
    "TypeIdentifier",
    "TypeMapping",
    "Column",
    "Index",
    "Relation",
    "Table",
    "IntrospectionResult",
    # Base classes
    "DialectDriver",
    "QueryClient",
    "RawColumn",
    # Type mappers
    "TypeMapper",
    "PostgresTypeMapper",
    # Default values
    "AUTO_INCREMENT",
    "DefaultValueParser",
    "PostgresDefaultValueParser",
    # Drivers
    "PostgresDriver",
]
