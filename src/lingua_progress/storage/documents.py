"""JSON document helpers (fcntl.flock + atomic write)."""

import fcntl
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class StorageError(Exception):
    """A document could not be read or written."""


def validate_identifier(value: str, kind: str = "identifier") -> str:
    """Reject identifiers that are unsafe to use as path components."""
    if not IDENTIFIER_PATTERN.match(value):
        raise ValueError(f"Invalid {kind}: {value!r}")
    return value


def read_document(path: Path) -> dict[str, Any] | None:
    """Read a JSON document under a shared lock. Returns None if absent."""
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            data = json.load(f)
            fcntl.flock(f, fcntl.LOCK_UN)
    except (OSError, json.JSONDecodeError) as e:
        raise StorageError(f"Failed to read {path.name}") from e
    return data


def write_document(path: Path, data: dict[str, Any]) -> None:
    """Replace a JSON document atomically."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", dir=path.parent, delete=False, suffix=".json", encoding="utf-8"
        ) as tmp:
            json.dump(data, tmp, indent=2)
        os.replace(tmp.name, path)
    except OSError as e:
        raise StorageError(f"Failed to write {path.name}") from e
