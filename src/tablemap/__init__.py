"""tablemap: map typed records to SQL tables through prepared named-parameter statements."""

__version__ = "0.1.0"

from tablemap.client import DBAPIClient, ExecResult
from tablemap.config import TablemapConfig
from tablemap.destinations import RecordList, Scalar
from tablemap.dialects import MYSQL, POSTGRESQL, SQLITE, Dialect, get_dialect
from tablemap.errors import (
    ArityError,
    BindingError,
    ColumnNotMappedError,
    CompilationError,
    DeclarationError,
    DestinationError,
    ExecutionError,
    MissingNamedValueError,
    MissingValuesError,
    ParameterSyntaxError,
    PrepareError,
    ShapeError,
    TablemapError,
    UnregisteredTypeError,
    ValueTypeError,
)
from tablemap.mapper import Mapper
from tablemap.statement import ROWS_UNKNOWN, Statement, compile_named
from tablemap.table import FieldDescriptor, TableDescriptor, build_table
from tablemap.types import Field, Record

__all__ = [
    "__version__",
    "Record",
    "Field",
    "Mapper",
    "Statement",
    "compile_named",
    "ROWS_UNKNOWN",
    "TableDescriptor",
    "FieldDescriptor",
    "build_table",
    "Scalar",
    "RecordList",
    "Dialect",
    "SQLITE",
    "MYSQL",
    "POSTGRESQL",
    "get_dialect",
    "DBAPIClient",
    "ExecResult",
    "TablemapConfig",
    "TablemapError",
    "DeclarationError",
    "UnregisteredTypeError",
    "CompilationError",
    "ParameterSyntaxError",
    "PrepareError",
    "BindingError",
    "MissingValuesError",
    "MissingNamedValueError",
    "ArityError",
    "ValueTypeError",
    "ExecutionError",
    "ShapeError",
    "DestinationError",
    "ColumnNotMappedError",
]
