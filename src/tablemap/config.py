"""Configuration for the tablemap mapper."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass


def utc_timestamp() -> int:
    """Current UTC time as Unix seconds."""
    return int(time.time())


@dataclass
class TablemapConfig:
    """Configuration for a Mapper."""

    dialect: str = "sqlite"
    clock: Callable[[], int] = utc_timestamp
    log_statements: bool = False
