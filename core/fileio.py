"""Atomic file I/O utilities for the reminder workspace."""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import yaml


def read_text(path: Path) -> str:
    """Read a text file, returning empty string if missing."""
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_json(path: Path) -> Any:
    """Read a JSON document, returning None if missing or blank.

    Malformed JSON raises ``json.JSONDecodeError``; callers decide
    whether that is fatal.
    """
    text = read_text(path)
    if not text.strip():
        return None
    return json.loads(text)


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping, returning empty dict if missing, empty or not a mapping."""
    text = read_text(path)
    if not text.strip():
        return {}
    result = yaml.safe_load(text)
    return result if isinstance(result, dict) else {}


def _atomic_write(path: Path, content: str, suffix: str = ".tmp") -> None:
    """Atomic write with file locking: temp file + flock + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=suffix)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        os.rename(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


@contextmanager
def locked(path: Path) -> Iterator[None]:
    """Hold an exclusive flock on *path* for the duration of the block.

    Each entry opens its own descriptor, so threads and separate processes
    both serialize on the same lock file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def write_json_atomic(path: Path, data: Any) -> None:
    """Atomic JSON write. Accepts any JSON-serializable blob (lists included)."""
    _atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n", suffix=".json")


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    """Atomic YAML write."""
    content = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    _atomic_write(path, content, suffix=".yaml")
