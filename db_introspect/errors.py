"""Error types for db-introspect."""

from typing import Optional, Dict, Any


class IntrospectionError(Exception):
    """Base exception for introspection errors."""

    def __init__(self, message: str, code: str = "INTROSPECTION_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConnectionError(IntrospectionError):
    """Error connecting to the database."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class QueryFailure(IntrospectionError):
    """A catalog query could not be executed.

    Aborts the whole introspection run. Carries the step (e.g. 'columns',
    'indices') and the table being introspected when the query failed.
    """

    def __init__(
        self,
        step: str,
        dialect: str,
        schema: Optional[str] = None,
        table: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        target = schema or ""
        if table:
            target = f"{target}.{table}" if target else table
        message = f"Failed to query {step}"
        if target:
            message += f" for {target}"
        if cause is not None:
            message += f": {cause}"

        super().__init__(
            message,
            code="QUERY_FAILURE",
            details={
                "dialect": dialect,
                "step": step,
                "schema": schema,
                "table": table,
            },
        )
        self.step = step
        self.dialect = dialect
        self.schema = schema
        self.table = table
        self.cause = cause


class UnknownDialectError(IntrospectionError):
    """No driver is registered for the requested dialect."""

    def __init__(self, dialect: str, available: Optional[list] = None):
        super().__init__(
            f"Unknown dialect: {dialect}",
            code="UNKNOWN_DIALECT",
            details={"dialect": dialect, "available": available or []},
        )
