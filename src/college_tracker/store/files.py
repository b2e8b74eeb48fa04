"""
JSON file helpers for the data directory.

Every document is written with the same atomic replace: serialize to a sibling
temp file, fsync, then ``os.replace`` over the target. Readers therefore see
either the previous document or the new one, never a partial write.
"""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base exception for data-directory errors."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.message = message
        self.path = path


def read_json(path: Path) -> Any:
    """
    Read and parse one JSON document.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON (json.JSONDecodeError)
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def dump_json(data: Any) -> str:
    """Serialize a document the way it is stored (2-space indent, UTF-8 kept)."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json_atomic(path: Path, data: Any) -> None:
    """
    Atomically replace ``path`` with ``data`` serialized as JSON.

    Parent directories are created as needed. On any failure the temp file is
    removed and the exception propagates; the previous document is untouched.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = dump_json(data)

    tmp_path = path.with_name(f"{path.name}.tmp-{time.time_ns()}-{os.getpid()}")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        raise


def remove_quietly(path: Path) -> bool:
    """Delete a file if present. Returns True when something was removed."""
    try:
        Path(path).unlink()
    except FileNotFoundError:
        return False
    logger.debug("Removed %s", path)
    return True
