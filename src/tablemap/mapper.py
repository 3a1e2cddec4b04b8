"""Mapper: registry of record tables and the standard CRUD operations."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from tablemap.client import Client
from tablemap.config import TablemapConfig
from tablemap.destinations import RecordList
from tablemap.dialects import Dialect, get_dialect
from tablemap.errors import (
    DeclarationError,
    ExecutionError,
    PrepareError,
    UnregisteredTypeError,
)
from tablemap.statement import Statement, compile_named
from tablemap.table import TableDescriptor, build_table

logger = structlog.get_logger(__name__)


def _type_of(obj: Any) -> type:
    if obj is None:
        raise DeclarationError("Cannot use None to define type")
    if isinstance(obj, type):
        return obj
    return type(obj)


class Mapper:
    """Maps Record types to tables and runs statements through a client.

    The mapper is not synchronized: register, unregister and the first
    ``select_by`` for a column must not race with each other.
    """

    def __init__(
        self,
        client: Client,
        dialect: Dialect | None = None,
        *,
        config: TablemapConfig | None = None,
    ) -> None:
        self.config = config or TablemapConfig()
        self.client = client
        self.dialect = dialect or get_dialect(self.config.dialect)
        self._tables: dict[type, TableDescriptor] = {}

    @property
    def tables(self) -> list[TableDescriptor]:
        return list(self._tables.values())

    def register(self, record: Any, name: str) -> TableDescriptor:
        """Assign a table name to a record type (a class or an instance of it)."""
        t = _type_of(record)

        existing = self._tables.get(t)
        if existing is not None:
            raise DeclarationError(
                f"Type '{t.__name__}' already has assigned table name '{existing.name}'"
            )

        tbl = build_table(t, name)
        try:
            self._prepare_standard_statements(tbl)
        except Exception:
            for stmt in tbl.statements():
                stmt.close()
            raise

        self._tables[t] = tbl
        logger.debug(
            "table.registered",
            record_type=t.__name__,
            table=name,
            columns=tbl.num_field,
            auto_columns=tbl.num_field_auto,
        )
        return tbl

    def unregister(self, record: Any) -> bool:
        """Remove the table assigned to a record type.

        Returns False if the type had no table or ``record`` is None.
        """
        if record is None:
            return False
        tbl = self._tables.pop(_type_of(record), None)
        if tbl is None:
            return False
        for stmt in tbl.statements():
            stmt.close()
        logger.debug("table.unregistered", record_type=tbl.record_type.__name__, table=tbl.name)
        return True

    def table(self, record: Any) -> TableDescriptor:
        t = _type_of(record)
        tbl = self._tables.get(t)
        if tbl is None:
            raise UnregisteredTypeError(t)
        return tbl

    def _prepare_standard_statements(self, tbl: TableDescriptor) -> None:
        suffix = ""
        if self.dialect.insert_suffix is not None:
            suffix = self.dialect.insert_suffix(tbl)
        tbl.insert_query = self.prepare(tbl.insert_sql(suffix))
        tbl.update_query = self.prepare(tbl.update_sql())
        tbl.delete_query = self.prepare(tbl.delete_sql())

    def prepare(self, query: str) -> Statement:
        """Compile a query with ``:name`` placeholders and prepare it."""
        text, params = compile_named(query, self.dialect.placeholder())
        try:
            handle = self.client.prepare(text)
        except Exception as e:
            raise PrepareError(text, str(e)) from e

        if self.config.log_statements:
            logger.debug("statement.prepared", query=text, params=params)
        return Statement(self, text, params, handle, template=query)

    def prepare_select(self, record: Any, column: str) -> Statement:
        """Prepare ``SELECT *`` from the record's table filtered by one column."""
        tbl = self.table(record)
        if column not in tbl.fields:
            raise DeclarationError(
                f"Record type '{tbl.record_type.__name__}' has no field assigned to column "
                f"'{column}' of table '{tbl.name}'"
            )
        return self.prepare(tbl.select_sql(column))

    def _select_query(self, tbl: TableDescriptor, column: str) -> Statement:
        stmt = tbl.select_queries.get(column)
        if stmt is None:
            stmt = self.prepare_select(tbl.record_type, column)
            tbl.select_queries[column] = stmt
        return stmt

    def _record_table(self, dest: Any) -> TableDescriptor:
        if isinstance(dest, RecordList):
            return self.table(dest.record_type)
        return self.table(dest)

    def select_all(self, dest: RecordList[Any]) -> int:
        """Load every row of the table into ``dest``."""
        tbl = self._record_table(dest)
        with self.prepare(tbl.select_sql()) as stmt:
            return stmt.query(dest)

    def select_by(self, dest: Any, column: str, value: Any) -> int:
        """Load rows whose ``column`` equals ``value`` into a record or RecordList.

        The statement is prepared on first use per column and kept with the table.
        """
        tbl = self._record_table(dest)
        return self._select_query(tbl, column).query(dest, {column: value})

    def select_by_id(self, dest: Any, id_value: Any) -> int:
        tbl = self._record_table(dest)
        return self.select_by(dest, tbl.id_field.column, id_value)

    def insert(self, record: Any) -> None:
        """Insert a record and fill in its id, created and modified fields.

        The generated identifier is written back only to an ``auto`` id field;
        a caller-supplied id is left as it is.
        """
        now = self.config.clock()
        tbl = self.table(record)
        params = tbl.params_of(record)

        if tbl.created_field is not None:
            params[tbl.created_field.column] = now
        if tbl.modified_field is not None:
            params[tbl.modified_field.column] = now

        if self.dialect.custom_insert is not None:
            new_id = self.dialect.custom_insert(tbl, params)
        else:
            res = tbl.insert_query._execute(params)
            new_id = res.lastrowid

        if tbl.id_field.auto:
            self._set_generated_id(tbl, record, new_id)

        if tbl.created_field is not None:
            tbl.created_field.set(record, now)
        if tbl.modified_field is not None:
            tbl.modified_field.set(record, now)

    def _set_generated_id(self, tbl: TableDescriptor, record: Any, new_id: Any) -> None:
        if new_id is None:
            # The driver gave no generated id; the record keeps its current value.
            logger.warning(
                "insert.id_unavailable",
                record_type=tbl.record_type.__name__,
                table=tbl.name,
                dialect=self.dialect.name,
            )
            return
        try:
            new_id = tbl.id_field.convert(new_id)
        except ValidationError as e:
            raise ExecutionError("insert", str(e)) from e
        tbl.id_field.set(record, new_id)

    def update(self, record: Any) -> int:
        """Update the row identified by the record's id field.

        Returns the number of affected rows.
        """
        now = self.config.clock()
        tbl = self.table(record)
        params = tbl.params_of(record)

        if tbl.modified_field is not None:
            params[tbl.modified_field.column] = now

        num = tbl.update_query.exec(params)

        if tbl.modified_field is not None:
            tbl.modified_field.set(record, now)
        return num

    def delete(self, record: Any) -> int:
        tbl = self.table(record)
        return tbl.delete_query.exec(tbl.params_of(record))

    def close(self) -> None:
        """Close every prepared statement and forget all tables."""
        for record_type in list(self._tables):
            self.unregister(record_type)
