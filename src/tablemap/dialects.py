"""SQL dialects: placeholder styles and generated-identifier retrieval."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from tablemap.table import TableDescriptor


class Placeholder(Protocol):
    """Stateful generator of positional placeholders for one statement."""

    def next(self) -> str: ...


class FixedPlaceholder:
    """Same token for every parameter, e.g. ``?``."""

    def __init__(self, token: str = "?") -> None:
        self.token = token

    def next(self) -> str:
        return self.token


class NumberedPlaceholder:
    """Incrementing token, e.g. ``$1``, ``$2``."""

    def __init__(self, prefix: str = "$") -> None:
        self.prefix = prefix
        self.n = 0

    def next(self) -> str:
        self.n += 1
        return f"{self.prefix}{self.n}"


@dataclass(frozen=True)
class Dialect:
    """Database-engine-specific behaviour consumed by the mapper.

    ``placeholder`` is required and returns a fresh generator per statement.
    ``insert_suffix`` is appended to the generated insert statement.
    ``custom_insert`` runs the insert and returns the generated identifier;
    without it the mapper executes the insert and reads the driver-reported
    last row id.
    """

    name: str
    placeholder: Callable[[], Placeholder]
    insert_suffix: Callable[[TableDescriptor], str] | None = None
    custom_insert: Callable[[TableDescriptor, dict[str, Any]], int | None] | None = None


def _returning_suffix(table: TableDescriptor) -> str:
    return f"RETURNING {table.id_field.column}"


def _returning_insert(table: TableDescriptor, params: dict[str, Any]) -> int | None:
    from tablemap.destinations import Scalar

    generated = Scalar(table.id_field.kind)
    table.insert_query.query(generated, params)
    return generated.value


SQLITE = Dialect(name="sqlite", placeholder=FixedPlaceholder)

MYSQL = Dialect(name="mysql", placeholder=FixedPlaceholder)

POSTGRESQL = Dialect(
    name="postgresql",
    placeholder=NumberedPlaceholder,
    insert_suffix=_returning_suffix,
    custom_insert=_returning_insert,
)

_DIALECTS = {d.name: d for d in (SQLITE, MYSQL, POSTGRESQL)}
_ALIASES = {"postgres": "postgresql", "pg": "postgresql", "sqlite3": "sqlite"}


def get_dialect(name: str) -> Dialect:
    """Look up a built-in dialect by name."""
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    try:
        return _DIALECTS[key]
    except KeyError:
        raise ValueError(
            f"Unknown dialect '{name}'. Available: {', '.join(sorted(_DIALECTS))}"
        ) from None
