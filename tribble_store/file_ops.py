"""
Raw file operations for local storage.

Provides the open/write/read/close primitives the framed store and the
config loader are built on:
- Append-or-create and truncate-or-create writes
- Whole-file reads
- Directory bootstrap

Every handle is scoped by a context manager, so it is closed on all
exit paths. OS failures are re-raised as StorageIOError.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .exceptions import StorageIOError

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> None:
    """Ensure directory exists, creating if necessary.

    Args:
        path: Directory path to ensure exists
    """
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageIOError("create_directory", str(path), e) from e


def file_exists(path: Path) -> bool:
    """Check if a path exists.

    Args:
        path: Path to check

    Returns:
        True if the path exists
    """
    try:
        return Path(path).exists()
    except OSError:
        return False


def append_file(path: Path, data: bytes | None) -> None:
    """Append bytes to a file, creating it if absent.

    Bytes already in the file are never touched.

    Args:
        path: Target file
        data: Bytes to append. None only creates the file.
    """
    try:
        with open(path, "ab") as f:
            if data is not None:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
    except OSError as e:
        raise StorageIOError("append_file", str(path), e) from e

    logger.debug(f"Appended {len(data or b'')} bytes to {path}")


def overwrite_file(path: Path, data: bytes | None) -> None:
    """Replace a file's entire content, creating it if absent.

    Args:
        path: Target file
        data: New content. None only truncates.
    """
    try:
        with open(path, "wb") as f:
            if data is not None:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
    except OSError as e:
        raise StorageIOError("overwrite_file", str(path), e) from e

    logger.debug(f"Overwrote {path} with {len(data or b'')} bytes")


def read_file(path: Path) -> bytes:
    """Read a whole file into memory.

    Args:
        path: File to read

    Returns:
        File content

    Raises:
        StorageIOError: If the file is missing or unreadable
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise StorageIOError("read_file", str(path), e) from e
