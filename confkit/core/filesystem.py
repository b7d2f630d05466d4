"""
File system utilities for confkit.

This module provides the change-detecting file operations the configure
run relies on:
- Idempotent directory creation
- Byte-for-byte content comparison
- Copy-if-changed and move-if-changed, marking the result read-only
- Atomic writes (temp file + rename)

A generated artifact is only ever replaced when its content actually
changes, so downstream build tools that watch modification times are
not re-triggered by a no-op configure run.
"""

import filecmp
import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Union

from confkit.core.exceptions import ConfkitError

logger = logging.getLogger(__name__)


class FilesystemError(ConfkitError):
    """Base exception for filesystem operations."""

    pass


# ============================================================================
# Directories
# ============================================================================


def ensure_directory(path: Union[str, Path]) -> bool:
    """
    Ensure a directory exists (idempotent).

    Args:
        path: Directory path

    Returns:
        True if the directory was created, False if it already existed

    Example:
        >>> ensure_directory('build/src/skia')
        True
    """
    path = Path(path)
    if path.is_dir():
        return False

    logger.info(f"mkdir -p {path}")
    path.mkdir(parents=True, exist_ok=True)
    return True


# ============================================================================
# Content comparison and permissions
# ============================================================================


def files_identical(first: Union[str, Path], second: Union[str, Path]) -> bool:
    """
    Compare two files byte for byte.

    A missing file is never identical to anything.

    Args:
        first: First file
        second: Second file

    Returns:
        True if both exist and have identical content
    """
    first = Path(first)
    second = Path(second)
    if not (first.is_file() and second.is_file()):
        return False
    return filecmp.cmp(first, second, shallow=False)


def make_read_only(path: Union[str, Path]) -> None:
    """
    Remove the owner write bit from a file (``chmod u-w``).

    Args:
        path: File to mark read-only
    """
    path = Path(path)
    mode = path.stat().st_mode
    path.chmod(mode & ~stat.S_IWUSR)


def _default_file_mode() -> int:
    """Mode a newly created file gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _unlink_for_replace(path: Path) -> None:
    """Remove a possibly read-only destination before overwriting it."""
    if path.exists() or path.is_symlink():
        path.unlink()


# ============================================================================
# Safe file operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.
    The rename also succeeds over a read-only destination.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        # newline="" keeps the bytes identical on every platform
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding, newline="") as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        # mkstemp creates 0600; give the file the mode a plain create would
        temp_path.chmod(_default_file_mode())
        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def copy_if_changed(source: Union[str, Path], destination: Union[str, Path]) -> bool:
    """
    Copy a file unless the destination already has identical content.

    The copied file is marked read-only.

    Args:
        source: File to copy
        destination: Target path

    Returns:
        True if the destination was (re)written

    Raises:
        FilesystemError: If the source does not exist
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_file():
        raise FilesystemError(f"Source does not exist: {source}")

    if files_identical(source, destination):
        logger.info(f"leaving {destination} unchanged")
        return False

    logger.info(f"cp {source} {destination}")
    destination.parent.mkdir(parents=True, exist_ok=True)
    _unlink_for_replace(destination)
    shutil.copyfile(source, destination)
    make_read_only(destination)
    return True


def move_if_changed(source: Union[str, Path], destination: Union[str, Path]) -> bool:
    """
    Move a file into place unless the destination has identical content.

    When the content is identical the source is left where it is and the
    destination (including its modification time) is untouched. A moved
    file is marked read-only.

    Args:
        source: File to move
        destination: Target path

    Returns:
        True if the destination was replaced

    Raises:
        FilesystemError: If the source does not exist
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_file():
        raise FilesystemError(f"Source does not exist: {source}")

    if files_identical(source, destination):
        logger.info(f"leaving {destination} unchanged")
        return False

    logger.info(f"mv {source} {destination}")
    destination.parent.mkdir(parents=True, exist_ok=True)
    os.replace(source, destination)
    make_read_only(destination)
    return True


def touch(path: Union[str, Path]) -> None:
    """Create a file or update its modification time."""
    Path(path).touch()


__all__ = [
    "FilesystemError",
    "ensure_directory",
    "files_identical",
    "make_read_only",
    "atomic_write",
    "copy_if_changed",
    "move_if_changed",
    "touch",
]
