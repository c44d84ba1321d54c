"""Filesystem helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .detection import detect_platform

__all__ = ["atomic_write_text", "is_executable"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def is_executable(path: Path) -> bool:
    """True if `path` is a regular file that the OS would execute.

    On platforms without an executable bit, existence is enough.
    """
    if not path.is_file():
        return False
    if not detect_platform().has_exec_bit:
        return True
    return os.access(path, os.X_OK)
