"""Database data models for schema introspection."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class TypeIdentifier(str, Enum):
    """Dialect-independent type tags used by the data model."""

    UUID = "Uuid"
    ID = "Id"
    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    DATE_TIME = "DateTime"
    JSON = "Json"


@dataclass(frozen=True)
class TypeMapping:
    """Outcome of mapping a raw column type.

    An unmapped type has no identifier and carries an error plus a comment
    for whoever has to handle the column by hand.
    """
    identifier: Optional[TypeIdentifier]
    comment: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_mapped(self) -> bool:
        return self.identifier is not None


@dataclass(frozen=True)
class Column:
    """Represents a database column."""
    name: str
    data_type: str
    type_identifier: Optional[TypeIdentifier]
    is_nullable: bool = True
    default_value: Optional[str] = None
    comment: Optional[str] = None
    is_primary_key: bool = False
    is_unique: bool = False
    type_comment: Optional[str] = None
    type_error: Optional[str] = None

    @property
    def is_partial(self) -> bool:
        """True when the column type could not be mapped."""
        return self.type_identifier is None and self.type_error is not None


@dataclass(frozen=True)
class Index:
    """Represents an index; fields are kept in catalog order.

    Expression entries appear in fields as their expression text, so the
    field count always matches the index's key count.
    """
    name: str
    table_name: str
    fields: Tuple[str, ...]
    unique: bool = False
    is_primary_key: bool = False
    has_expressions: bool = False
    is_partial: bool = False

    @property
    def unique_column(self) -> Optional[str]:
        """The plain column this index makes unique on every row, if any."""
        if not self.unique or self.has_expressions or self.is_partial or len(self.fields) != 1:
            return None
        return self.fields[0]


@dataclass(frozen=True)
class Relation:
    """Represents a foreign-key column pair between two tables."""
    source_table: str
    source_column: str
    target_table: str
    target_column: str
    constraint_name: Optional[str] = None
    target_schema: Optional[str] = None
    relationship_type: str = "many_to_one"  # 'many_to_one', 'one_to_one'


@dataclass(frozen=True)
class Table:
    """Represents a database table."""
    name: str
    columns: Tuple[Column, ...] = ()
    indices: Tuple[Index, ...] = ()
    comment: Optional[str] = None

    def __post_init__(self):
        seen = set()
        for column in self.columns:
            if column.name in seen:
                raise ValueError(f"Duplicate column '{column.name}' in table '{self.name}'")
            seen.add(column.name)

    def get_column(self, column_name: str) -> Optional[Column]:
        """Find a column by name."""
        for column in self.columns:
            if column.name == column_name:
                return column
        return None

    @property
    def primary_key_columns(self) -> List[str]:
        """Primary key column names in index order."""
        for index in self.indices:
            if index.is_primary_key:
                return list(index.fields)
        return [c.name for c in self.columns if c.is_primary_key]


@dataclass(frozen=True)
class IntrospectionResult:
    """Normalized description of one introspected schema."""
    schema: str
    dialect: str
    tables: Tuple[Table, ...] = ()
    relations: Tuple[Relation, ...] = ()

    def __post_init__(self):
        names = [t.name for t in self.tables]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate table names in schema '{self.schema}'")

    def get_table(self, table_name: str) -> Optional[Table]:
        """Find a table by name."""
        for table in self.tables:
            if table.name == table_name:
                return table
        return None

    def partial_columns(self) -> List[Tuple[str, Column]]:
        """Columns whose type needs manual handling, as (table, column) pairs."""
        return [
            (table.name, column)
            for table in self.tables
            for column in table.columns
            if column.is_partial
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to plain data for JSON output."""
        return asdict(self, dict_factory=_plain_dict)


def _plain_dict(items) -> Dict[str, Any]:
    result = {}
    for key, value in items:
        if isinstance(value, TypeIdentifier):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        result[key] = value
    return result
