"""Structured error types for tablemap."""

from __future__ import annotations


class TablemapError(Exception):
    """Base error for all tablemap errors."""


class DeclarationError(TablemapError):
    """Raised when a record-to-table mapping is malformed."""


class UnregisteredTypeError(TablemapError):
    """Raised when a record type has no table assigned to it."""

    def __init__(self, record_type: type) -> None:
        self.record_type = record_type
        super().__init__(f"Type '{record_type.__name__}' has no assigned table")


class CompilationError(TablemapError):
    """Raised when a statement template cannot be compiled."""


class ParameterSyntaxError(CompilationError):
    """Raised when a named placeholder has no name after the marker."""

    def __init__(self, token: str, query: str) -> None:
        self.token = token
        self.query = query
        super().__init__(f"Wrong parameter placeholder '{token}' in query: {query}")


class PrepareError(CompilationError):
    """Raised when the underlying client fails to prepare a statement."""

    def __init__(self, query: str, detail: str) -> None:
        self.query = query
        self.detail = detail
        super().__init__(f"tablemap: prepare failed for '{query}': {detail}")


class BindingError(TablemapError):
    """Raised when parameter values cannot be bound to a statement."""


class MissingValuesError(BindingError):
    """Raised when no values are supplied for a statement with parameters."""

    def __init__(self, params: list[str]) -> None:
        self.params = params
        super().__init__(f"Values for all parameters are missing: {params}")


class MissingNamedValueError(BindingError):
    """Raised when a named parameter has no value in the supplied mapping."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Value for parameter '{name}' is missing")


class ArityError(BindingError):
    """Raised when a single value is supplied to a statement without exactly one slot."""

    def __init__(self, expected: int) -> None:
        self.expected = expected
        super().__init__(
            f"A single value can only be bound to a statement with one parameter, "
            f"statement declares {expected}"
        )


class ValueTypeError(BindingError):
    """Raised when a bare parameter value is not a supported scalar."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"Unsupported parameter value type '{type(value).__name__}'; "
            "expected str, bool, int or float"
        )


class ExecutionError(TablemapError):
    """Raised when the underlying client fails while running a statement."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"tablemap: {operation} failed: {detail}")


class ShapeError(TablemapError):
    """Raised when results cannot be materialized into the destination."""


class DestinationError(ShapeError):
    """Raised when a query destination is not an eligible target."""


class ColumnNotMappedError(ShapeError):
    """Raised when a result column has no field in the destination record."""

    def __init__(self, column: str, table: str, record_type: type) -> None:
        self.column = column
        self.table = table
        self.record_type = record_type
        super().__init__(
            f"Column '{column}' of table '{table}' is not mapped to any field "
            f"of type '{record_type.__name__}'"
        )
