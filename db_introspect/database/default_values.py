"""Normalization of column default expressions."""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

# Marker returned for sequence-backed defaults
AUTO_INCREMENT = "[AUTO INCREMENT]"


class DefaultValueParser(ABC):
    """Abstract base class for default value normalization."""

    @abstractmethod
    def parse(self, raw: Optional[str]) -> Optional[str]:
        """Turn a catalog default expression into a static literal.

        Returns None when there is no static default, AUTO_INCREMENT for
        sequence-backed columns, and the literal text otherwise.
        """
        pass


class PostgresDefaultValueParser(DefaultValueParser):
    """Default value parser for expressions stored in pg_attrdef."""

    SEQUENCE_MARKERS: Tuple[str, ...] = ("nextval('",)
    TIMESTAMP_MARKERS: Tuple[str, ...] = (
        "now()",
        "'now'::text",
        "CURRENT_TIMESTAMP",
        "transaction_timestamp()",
        "statement_timestamp()",
        "clock_timestamp()",
        "LOCALTIMESTAMP",
        "LOCALTIME",
        "CURRENT_DATE",
        "CURRENT_TIME",
    )
    CAST_OPERATOR = "::"

    def parse(self, raw: Optional[str]) -> Optional[str]:
        if raw is None:
            return None

        # Checked before cast stripping: 'now'::text is not a literal.
        if any(marker in raw for marker in self.SEQUENCE_MARKERS):
            return AUTO_INCREMENT

        if any(marker in raw for marker in self.TIMESTAMP_MARKERS):
            return None

        if self.CAST_OPERATOR in raw:
            literal = raw.rsplit(self.CAST_OPERATOR, 1)[0]
            if literal.endswith("'"):
                literal = literal[:-1]
            if literal.startswith("'"):
                literal = literal[1:]

            if literal == "NULL":
                return None
            return literal

        return raw
