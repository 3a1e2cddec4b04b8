"""Named-parameter statements: compilation, binding, execution and row mapping."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from tablemap.client import ExecResult, RowCursor, StatementHandle
from tablemap.destinations import RecordList, Scalar, Shape, classify
from tablemap.dialects import Placeholder
from tablemap.errors import (
    ArityError,
    ColumnNotMappedError,
    ExecutionError,
    MissingNamedValueError,
    MissingValuesError,
    ParameterSyntaxError,
    ShapeError,
    ValueTypeError,
)

if TYPE_CHECKING:
    from tablemap.mapper import Mapper
    from tablemap.table import FieldDescriptor, TableDescriptor

logger = structlog.get_logger(__name__)

PARAM_PATTERN = re.compile(r":[^,\s)]*")

# Returned by exec() when the driver cannot report affected rows.
ROWS_UNKNOWN = -1

_BARE_VALUE_TYPES = (str, bool, int, float)


def compile_named(query: str, placeholder: Placeholder) -> tuple[str, list[str]]:
    """Rewrite ``:name`` placeholders into the dialect's positional form.

    Returns the rewritten query and the parameter names in the order their
    placeholders appear. A name used twice gets two slots.
    """
    names: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if len(token) < 2:
            raise ParameterSyntaxError(token, query)
        names.append(token[1:])
        return placeholder.next()

    return PARAM_PATTERN.sub(_replace, query), names


class Statement:
    """Prepared statement plus the ordered names of its parameters."""

    def __init__(
        self,
        mapper: Mapper,
        query: str,
        params: list[str],
        handle: StatementHandle,
        *,
        template: str | None = None,
    ) -> None:
        self.mapper = mapper
        self.text = query
        self.params = params
        self.template = template if template is not None else query
        self._handle = handle
        self.closed = False

    def __repr__(self) -> str:
        return f"Statement(text={self.text!r}, params={self.params!r})"

    def __enter__(self) -> Statement:
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.close()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._handle.close()

    def bind(self, params: Any = None) -> list[Any]:
        """Return parameter values in declared order.

        ``params`` may be None (statement without parameters), a mapping from
        parameter name to value, or a single bare value for a statement with
        exactly one parameter slot.
        """
        num = len(self.params)

        if params is None:
            if num == 0:
                return []
            raise MissingValuesError(list(self.params))

        if isinstance(params, Mapping):
            values = []
            for name in self.params:
                if name not in params:
                    raise MissingNamedValueError(name)
                values.append(params[name])
            return values

        if not isinstance(params, _BARE_VALUE_TYPES):
            raise ValueTypeError(params)
        if num != 1:
            raise ArityError(num)
        return [params]

    def _execute(self, params: Any) -> ExecResult:
        values = self.bind(params)
        if self.mapper.config.log_statements:
            logger.debug("statement.exec", query=self.text, values=values)
        try:
            return self._handle.execute(values)
        except Exception as e:
            raise ExecutionError("exec", str(e)) from e

    def exec(self, params: Any = None) -> int:
        """Execute the statement and return the number of affected rows.

        Returns ``ROWS_UNKNOWN`` when the driver cannot tell.
        """
        res = self._execute(params)
        if res.rowcount is None or res.rowcount < 0:
            return ROWS_UNKNOWN
        return res.rowcount

    def query(self, dest: Any, params: Any = None) -> int:
        """Run the statement and map result rows into ``dest``.

        ``dest`` is a record instance (first row mapped in place), a
        ``RecordList`` (replaced with one new record per row) or a ``Scalar``
        (single column of the first row). Returns the number of rows mapped.
        """
        shape, record_type = classify(dest)

        tbl: TableDescriptor | None = None
        if record_type is not None:
            tbl = self.mapper.table(record_type)

        values = self.bind(params)
        if self.mapper.config.log_statements:
            logger.debug("statement.query", query=self.text, values=values, shape=shape.value)

        try:
            cursor = self._handle.query(values)
        except Exception as e:
            raise ExecutionError("query", str(e)) from e

        try:
            if tbl is None:
                return _scan_scalar(cursor, dest)
            if shape is Shape.RECORD:
                return _scan_record(cursor, tbl, dest)
            return _scan_records(cursor, tbl, dest)
        finally:
            cursor.close()


def _columns(cursor: RowCursor) -> list[str]:
    try:
        return cursor.columns()
    except Exception as e:
        raise ExecutionError("columns", str(e)) from e


def _fetch(cursor: RowCursor) -> Any:
    try:
        return cursor.fetchone()
    except Exception as e:
        raise ExecutionError("fetch", str(e)) from e


def _resolve_fields(columns: list[str], tbl: TableDescriptor) -> list[FieldDescriptor]:
    fields = []
    for col in columns:
        f = tbl.fields.get(col)
        if f is None:
            raise ColumnNotMappedError(col, tbl.name, tbl.record_type)
        fields.append(f)
    return fields


def _convert_row(row: Any, fields: list[FieldDescriptor]) -> list[Any]:
    try:
        return [f.convert(v) for f, v in zip(fields, row)]
    except ValidationError as e:
        raise ExecutionError("scan", str(e)) from e


def _scan_scalar(cursor: RowCursor, dest: Scalar) -> int:
    columns = _columns(cursor)
    if len(columns) != 1:
        raise ShapeError(f"Scalar destination expects 1 result column, got {len(columns)}")
    row = _fetch(cursor)
    if row is None:
        return 0
    try:
        dest.assign(row[0])
    except ValidationError as e:
        raise ExecutionError("scan", str(e)) from e
    return 1


def _scan_record(cursor: RowCursor, tbl: TableDescriptor, dest: Any) -> int:
    fields = _resolve_fields(_columns(cursor), tbl)
    row = _fetch(cursor)
    if row is None:
        return 0
    for f, value in zip(fields, _convert_row(row, fields)):
        f.set(dest, value)
    return 1


def _scan_records(cursor: RowCursor, tbl: TableDescriptor, dest: RecordList[Any]) -> int:
    fields = _resolve_fields(_columns(cursor), tbl)
    items = []
    while True:
        row = _fetch(cursor)
        if row is None:
            break
        record = tbl.record_type._blank()
        for f, value in zip(fields, _convert_row(row, fields)):
            f.set(record, value)
        items.append(record)
    dest[:] = items
    return len(items)
