"""
Build-directory locking for confkit.

A configure run writes module build directories and the generated
configuration artifacts. Two runs sharing one build tree (for example a
developer re-running configure while an IDE does the same) must not
interleave those writes, so the writing stage holds a file lock in the
build directory.

Usage:
    from confkit.core.locking import build_dir_lock

    with build_dir_lock(Path("build"), timeout=30):
        # Safely create directories and persist configuration
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from confkit.core.exceptions import FatalConfigurationError

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".confkit.lock"


@contextmanager
def build_dir_lock(build_dir: Path, timeout: float = 30):
    """
    Acquire the lock for a build directory.

    Args:
        build_dir: Build root directory (created if missing)
        timeout: Maximum wait time in seconds (default: 30)

    Yields:
        Path to the lock file

    Raises:
        FatalConfigurationError: If the lock can't be acquired within timeout
    """
    build_dir = Path(build_dir)
    build_dir.mkdir(parents=True, exist_ok=True)
    lock_path = build_dir / LOCK_FILE_NAME
    lock = FileLock(str(lock_path), timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired build directory lock: {lock_path}")
            yield lock_path
            logger.debug(f"Released build directory lock: {lock_path}")
    except LockTimeout as e:
        raise FatalConfigurationError(
            f"could not lock {build_dir} after {timeout}s; "
            "another configure run may be using this build directory"
        ) from e


__all__ = [
    "LOCK_FILE_NAME",
    "build_dir_lock",
]
