"""Shared test fixtures for tablemap tests."""

from __future__ import annotations

import sqlite3
from typing import Any

import pytest

from tablemap import SQLITE, DBAPIClient, ExecResult, Field, Mapper, Record, TablemapConfig

# --- Test Record types ---


class Details(Record):
    text: Field[str] = Field(column="text")


class Account(Record):
    id: Field[int] = Field(column="id", options="id,auto")
    active: Field[bool] = Field(column="b")
    created: Field[int] = Field(column="c", options="created")
    modified: Field[int] = Field(column="m", options="modified")
    details: Field[Details] = Field(embedded=True)


class Note(Record):
    id: Field[int] = Field(options="id, auto")
    title: Field[str]
    score: Field[float] = 0.0


class Town(Record):
    city: Field[str]


class Resident(Record):
    id: Field[int] = Field(options="id,auto")
    town: Field[Town] = Field(default=Town(city="nowhere"), embedded=True)


class Tag(Record):
    code: Field[str] = Field(options="id")
    label: Field[str]


SCHEMA = """
CREATE TABLE accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    text TEXT NOT NULL,
    b BOOLEAN NOT NULL,
    c INTEGER NOT NULL,
    m INTEGER NOT NULL
);
CREATE TABLE notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    score REAL NOT NULL
);
CREATE TABLE residents (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    city TEXT NOT NULL
);
CREATE TABLE tags (
    code TEXT PRIMARY KEY,
    label TEXT NOT NULL
);
"""


class Clock:
    """Deterministic clock: each call is one second later."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start - 1

    def __call__(self) -> int:
        self.now += 1
        return self.now


# --- Scripted client ---


class FakeCursor:
    def __init__(self, columns: list[str], rows: list[tuple[Any, ...]]) -> None:
        self._columns = columns
        self._rows = list(rows)
        self.fetched = 0
        self.closed = False

    def columns(self) -> list[str]:
        return list(self._columns)

    def fetchone(self) -> tuple[Any, ...] | None:
        if self.fetched >= len(self._rows):
            return None
        row = self._rows[self.fetched]
        self.fetched += 1
        return row

    def close(self) -> None:
        self.closed = True


class FakeHandle:
    def __init__(self, client: FakeClient, text: str) -> None:
        self.client = client
        self.text = text
        self.closed = False

    def execute(self, values: list[Any]) -> ExecResult:
        self.client.calls.append(("execute", self.text, list(values)))
        if self.client.fail is not None:
            raise RuntimeError(self.client.fail)
        return self.client.exec_result

    def query(self, values: list[Any]) -> FakeCursor:
        self.client.calls.append(("query", self.text, list(values)))
        if self.client.fail is not None:
            raise RuntimeError(self.client.fail)
        cursor = FakeCursor(self.client.columns, self.client.rows)
        self.client.cursors.append(cursor)
        return cursor

    def close(self) -> None:
        self.closed = True


class FakeClient:
    """Client that records every call and replays scripted results."""

    def __init__(self) -> None:
        self.prepared: list[str] = []
        self.handles: list[FakeHandle] = []
        self.calls: list[tuple[str, str, list[Any]]] = []
        self.cursors: list[FakeCursor] = []
        self.columns: list[str] = []
        self.rows: list[tuple[Any, ...]] = []
        self.exec_result = ExecResult(rowcount=1, lastrowid=None)
        self.fail: str | None = None
        self.fail_prepare: str | None = None

    def script(self, columns: list[str], rows: list[tuple[Any, ...]]) -> None:
        self.columns = columns
        self.rows = rows

    def prepare(self, text: str) -> FakeHandle:
        if self.fail_prepare is not None and self.fail_prepare in text:
            raise RuntimeError(f"syntax error near '{self.fail_prepare}'")
        self.prepared.append(text)
        handle = FakeHandle(self, text)
        self.handles.append(handle)
        return handle


# --- Fixtures ---


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def conn():
    """In-memory SQLite connection in autocommit mode with the test schema."""
    c = sqlite3.connect(":memory:", isolation_level=None)
    c.executescript(SCHEMA)
    yield c
    c.close()


@pytest.fixture
def mapper(conn, clock):
    """Mapper over SQLite with Account and Note registered."""
    m = Mapper(DBAPIClient(conn), SQLITE, config=TablemapConfig(clock=clock))
    m.register(Account, "accounts")
    m.register(Note, "notes")
    yield m
    m.close()


@pytest.fixture
def fake_client():
    return FakeClient()
