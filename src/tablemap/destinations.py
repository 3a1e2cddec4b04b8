"""Query destinations: scalar holders, single records and record lists."""

from __future__ import annotations

import enum
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

from tablemap.errors import DestinationError
from tablemap.types import Record, is_record_type

R = TypeVar("R", bound=Record)

_IMMUTABLE = (str, bytes, int, float, bool, complex, tuple, frozenset, type(None))


class Scalar:
    """Holder receiving the single column of the first result row."""

    def __init__(self, kind: Any = None, value: Any = None) -> None:
        self.kind = kind
        self.value = value
        self._adapter: TypeAdapter[Any] | None = None
        if kind is not None and not _is_holder(kind):
            self._adapter = TypeAdapter(kind)

    def assign(self, value: Any) -> None:
        if self._adapter is not None:
            value = self._adapter.validate_python(value)
        self.value = value

    def __repr__(self) -> str:
        return f"Scalar(kind={self.kind!r}, value={self.value!r})"


class RecordList(list, Generic[R]):  # type: ignore[type-arg]
    """List that knows the record type of its elements."""

    def __init__(self, record_type: type[R], items: Any = ()) -> None:
        super().__init__(items)
        self.record_type = record_type

    def __repr__(self) -> str:
        name = getattr(self.record_type, "__name__", self.record_type)
        return f"RecordList[{name}]({list.__repr__(self)})"


def _is_holder(obj: Any) -> bool:
    if isinstance(obj, type):
        return issubclass(obj, (Scalar, RecordList))
    return isinstance(obj, (Scalar, RecordList))


class Shape(enum.Enum):
    SCALAR = "scalar"
    RECORD = "record"
    SEQUENCE = "sequence"


def classify(dest: Any) -> tuple[Shape, type | None]:
    """Return the materialization shape of a destination and its record type."""
    if isinstance(dest, _IMMUTABLE) or isinstance(dest, type):
        raise DestinationError(
            f"Destination must be a Scalar, a record or a RecordList, got "
            f"'{type(dest).__name__}'"
        )

    if isinstance(dest, Scalar):
        if _is_holder(dest.kind) or _is_holder(dest.value):
            raise DestinationError("Destination is a holder of another destination")
        return Shape.SCALAR, None

    if isinstance(dest, RecordList):
        if not is_record_type(dest.record_type):
            raise DestinationError(
                f"RecordList element type '{dest.record_type!r}' is not a record type"
            )
        return Shape.SEQUENCE, dest.record_type

    if isinstance(dest, Record):
        return Shape.RECORD, type(dest)

    raise DestinationError(
        f"Cannot use value of type '{type(dest).__name__}' as a query destination"
    )
