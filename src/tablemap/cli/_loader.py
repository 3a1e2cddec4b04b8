"""Model loader: import Python modules and discover Record types."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

from tablemap.types import Record, is_record_type


def load_records(
    models: str | None = None,
    models_path: str | None = None,
) -> dict[str, type[Record]]:
    """Load Record classes from a Python module.

    Args:
        models: Dotted Python import path (e.g. 'myapp.models')
        models_path: Filesystem path to a Python file

    Returns:
        Record types keyed by class name
    """
    if models_path:
        path = Path(models_path).resolve()
        if not path.exists():
            raise FileNotFoundError(f"Models path not found: {models_path}")
        # Add parent to sys.path so import works
        parent = str(path.parent)
        if parent not in sys.path:
            sys.path.insert(0, parent)
        module = importlib.import_module(path.stem)
    elif models:
        module = importlib.import_module(models)
    else:
        raise ValueError("One of --models or --models-path is required")

    records: dict[str, type[Record]] = {}
    for attr_name in dir(module):
        obj = getattr(module, attr_name)
        if is_record_type(obj):
            records[obj.__name__] = obj
    return records
