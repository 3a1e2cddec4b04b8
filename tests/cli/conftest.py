"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog
from typer.testing import CliRunner

from tablemap.cli import app, state

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_state():
    yield
    state.json_output = False
    state.verbose = False
    structlog.reset_defaults()


def invoke(runner: CliRunner, args: list[str]) -> "Result":
    return runner.invoke(app, args, catch_exceptions=False)
