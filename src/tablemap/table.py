"""Table descriptors derived from Record definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

from tablemap.errors import DeclarationError
from tablemap.types import SCALAR_ZERO, Field, is_record_type

if TYPE_CHECKING:
    from tablemap.statement import Statement

_OPTIONS = ("auto", "id", "created", "modified", "skip")

_ADAPTERS: dict[type, TypeAdapter[Any]] = {kind: TypeAdapter(kind) for kind in SCALAR_ZERO}


@dataclass(frozen=True)
class FieldDescriptor:
    """Binding between one record attribute and one table column."""

    path: tuple[str, ...]
    column: str
    kind: type
    auto: bool = False
    id: bool = False
    created: bool = False
    modified: bool = False

    def get(self, record: Any) -> Any:
        for name in self.path:
            record = getattr(record, name)
        return record

    def set(self, record: Any, value: Any) -> None:
        for name in self.path[:-1]:
            record = getattr(record, name)
        setattr(record, self.path[-1], value)

    def convert(self, value: Any) -> Any:
        """Coerce a driver value to the field's kind (lax pydantic rules)."""
        return _ADAPTERS[self.kind].validate_python(value)

    def nested(self, name: str) -> FieldDescriptor:
        """Copy of this descriptor prefixed with an embedding attribute."""
        return FieldDescriptor(
            path=(name, *self.path),
            column=self.column,
            kind=self.kind,
            auto=self.auto,
            id=self.id,
            created=self.created,
            modified=self.modified,
        )


def _parse_options(owner: type, f: Field[Any]) -> set[str]:
    raw = f.options.replace(" ", "")
    if not raw:
        return set()
    opts = set()
    for opt in raw.split(","):
        if opt not in _OPTIONS:
            raise DeclarationError(
                f"Unknown option '{opt}' for field '{f.name}' in record type '{owner.__name__}'"
            )
        opts.add(opt)
    return opts


def parse_field(owner: type, f: Field[Any]) -> list[FieldDescriptor]:
    """Return descriptors for a field, expanding embedded sub-records."""
    if f.embedded:
        if not is_record_type(f.annotation):
            raise DeclarationError(
                f"Embedded field '{f.name}' of record type '{owner.__name__}' has unsupported "
                f"type '{f.annotation}'. Only Record subclasses can be embedded"
            )
        sub_fields: list[FieldDescriptor] = []
        for sub in f.annotation._field_definitions.values():
            sub_fields.extend(d.nested(f.name) for d in parse_field(owner, sub))
        return sub_fields

    if f.name.startswith("_"):
        return []

    opts = _parse_options(owner, f)
    if "skip" in opts:
        return []

    if f.annotation not in SCALAR_ZERO:
        raise DeclarationError(
            f"Field '{f.name}' of record type '{owner.__name__}' has unsupported type "
            f"'{f.annotation}'"
        )

    return [
        FieldDescriptor(
            path=(f.name,),
            column=f.column or f.name,
            kind=f.annotation,
            auto="auto" in opts,
            id="id" in opts,
            created="created" in opts,
            modified="modified" in opts,
        )
    ]


def named_placeholder(name: str) -> str:
    return f":{name}"


@dataclass
class TableDescriptor:
    """Metadata for one registered record type."""

    record_type: type
    name: str
    fields: dict[str, FieldDescriptor] = field(default_factory=dict)
    id_field: FieldDescriptor = None  # type: ignore[assignment]
    created_field: FieldDescriptor | None = None
    modified_field: FieldDescriptor | None = None
    num_field: int = 0
    num_field_auto: int = 0

    insert_query: Statement = None  # type: ignore[assignment]
    update_query: Statement = None  # type: ignore[assignment]
    delete_query: Statement = None  # type: ignore[assignment]
    select_queries: dict[str, Statement] = field(default_factory=dict)

    def _add(self, f: FieldDescriptor) -> None:
        t = self.record_type.__name__
        if f.column in self.fields:
            raise DeclarationError(
                f"Attempt to define several fields with the same column name '{f.column}' "
                f"in record type '{t}'"
            )
        self.fields[f.column] = f
        self.num_field += 1
        if f.auto:
            self.num_field_auto += 1

        for role in ("id", "created", "modified"):
            if not getattr(f, role):
                continue
            attr = f"{role}_field"
            if getattr(self, attr) is not None:
                raise DeclarationError(
                    f"Attempt to define several fields with '{role}' option in record type '{t}'"
                )
            setattr(self, attr, f)

    def insert_columns(self) -> list[str]:
        return [col for col, f in self.fields.items() if not f.auto]

    def update_columns(self) -> list[str]:
        return [col for col, f in self.fields.items() if not (f.id or f.auto or f.created)]

    def insert_sql(self, suffix: str = "") -> str:
        columns = self.insert_columns()
        holders = [named_placeholder(c) for c in columns]
        query = f"INSERT INTO {self.name}({', '.join(columns)}) VALUES({', '.join(holders)})"
        if suffix:
            query = f"{query} {suffix}"
        return query

    def update_sql(self) -> str:
        assignments = ", ".join(f"{c} = {named_placeholder(c)}" for c in self.update_columns())
        id_col = self.id_field.column
        return f"UPDATE {self.name} SET {assignments} WHERE {id_col} = {named_placeholder(id_col)}"

    def delete_sql(self) -> str:
        id_col = self.id_field.column
        return f"DELETE FROM {self.name} WHERE {id_col} = {named_placeholder(id_col)}"

    def select_sql(self, column: str | None = None) -> str:
        if column is None:
            return f"SELECT * FROM {self.name}"
        return f"SELECT * FROM {self.name} WHERE {column} = {named_placeholder(column)}"

    def params_of(self, record: Any) -> dict[str, Any]:
        """Current values of all mapped fields keyed by column."""
        return {col: f.get(record) for col, f in self.fields.items()}

    def statements(self) -> list[Statement]:
        standard = [self.insert_query, self.update_query, self.delete_query]
        return [s for s in standard if s is not None] + list(self.select_queries.values())


def build_table(record_type: type, name: str) -> TableDescriptor:
    """Inspect a Record subclass and build its table descriptor.

    Standard statements are not prepared here; the mapper compiles them once
    the layout has been validated.
    """
    if not is_record_type(record_type):
        type_name = getattr(record_type, "__name__", record_type)
        raise DeclarationError(f"Type '{type_name}' is not a record")
    if not name:
        raise DeclarationError("Table name cannot be an empty string")

    tbl = TableDescriptor(record_type=record_type, name=name)
    for f in record_type._field_definitions.values():
        for desc in parse_field(record_type, f):
            tbl._add(desc)

    if tbl.num_field == 0:
        raise DeclarationError(f"Record type '{record_type.__name__}' has no mapped fields")

    if tbl.id_field is None:
        raise DeclarationError(
            f"Record type '{record_type.__name__}' has no field with option 'id'"
        )

    if not tbl.update_columns():
        raise DeclarationError(
            f"Record type '{record_type.__name__}' has no fields to update besides "
            f"'id', 'auto' and 'created' ones"
        )

    return tbl


__all__ = [
    "FieldDescriptor",
    "TableDescriptor",
    "build_table",
    "named_placeholder",
    "parse_field",
]
