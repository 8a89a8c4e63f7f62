"""File I/O operations for rendering."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Iterable


def ensure_dir(path: Path) -> None:
    """Create a directory and its parents; existing directories are fine.

    Args:
        path: Directory to create
    """
    path.mkdir(parents=True, exist_ok=True)


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    ensure_dir(path.parent)


def atomic_write_chunks(path: Path, chunks: Iterable[str], mode: int = 0o644) -> None:
    """Stream text chunks to a file atomically using a temporary file.

    The destination is replaced only after every chunk was written, so an
    exception raised while producing chunks leaves any previous file intact.

    Args:
        path: Destination file path
        chunks: Text fragments written in order
        mode: File permissions (octal)
    """
    ensure_parent(path)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            for chunk in chunks:
                tmp.write(chunk)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
        os.chmod(path, mode)
    finally:
        if os.path.exists(tmp_name):
            with contextlib.suppress(OSError):
                os.remove(tmp_name)
