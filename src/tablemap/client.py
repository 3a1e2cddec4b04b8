"""Contract for the underlying SQL client, plus a PEP 249 adapter."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a statement execution.

    ``rowcount`` is -1 when the driver cannot tell how many rows were
    affected; ``lastrowid`` is None when the driver does not report
    generated identifiers.
    """

    rowcount: int = -1
    lastrowid: int | None = None


@runtime_checkable
class RowCursor(Protocol):
    def columns(self) -> list[str]: ...

    def fetchone(self) -> Sequence[Any] | None: ...

    def close(self) -> None: ...


@runtime_checkable
class StatementHandle(Protocol):
    def execute(self, values: Sequence[Any]) -> ExecResult: ...

    def query(self, values: Sequence[Any]) -> RowCursor: ...

    def close(self) -> None: ...


@runtime_checkable
class Client(Protocol):
    def prepare(self, text: str) -> StatementHandle: ...


class DBAPICursor:
    """RowCursor over a PEP 249 cursor."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor

    def columns(self) -> list[str]:
        description = self._cursor.description or ()
        return [d[0] for d in description]

    def fetchone(self) -> Sequence[Any] | None:
        return self._cursor.fetchone()

    def close(self) -> None:
        self._cursor.close()


class DBAPIStatement:
    """StatementHandle for PEP 249 drivers.

    DB-API has no separate prepare step; drivers that cache statements do so
    per cursor, so each call opens its own cursor.
    """

    def __init__(self, connection: Any, text: str) -> None:
        self._connection = connection
        self.text = text
        self.closed = False

    def _cursor(self, values: Sequence[Any]) -> Any:
        if self.closed:
            raise RuntimeError("statement is closed")
        cursor = self._connection.cursor()
        try:
            cursor.execute(self.text, tuple(values))
        except Exception:
            cursor.close()
            raise
        return cursor

    def execute(self, values: Sequence[Any]) -> ExecResult:
        cursor = self._cursor(values)
        try:
            rowcount = cursor.rowcount if cursor.rowcount is not None else -1
            return ExecResult(rowcount=rowcount, lastrowid=getattr(cursor, "lastrowid", None))
        finally:
            cursor.close()

    def query(self, values: Sequence[Any]) -> RowCursor:
        return DBAPICursor(self._cursor(values))

    def close(self) -> None:
        self.closed = True


class DBAPIClient:
    """Client backed by a PEP 249 connection in autocommit mode."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def prepare(self, text: str) -> StatementHandle:
        return DBAPIStatement(self.connection, text)

    def close(self) -> None:
        self.connection.close()
