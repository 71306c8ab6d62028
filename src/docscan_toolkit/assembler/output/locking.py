"""
Module: assembler.output.locking

Purpose:
    Serialize assemblies that target the same output path. The pipeline
    holds no cross-invocation lock itself; callers that may run several
    assemblies against one path wrap each call in output_path_lock().
    The lock file exists only while the lock is held.

Key Functions:
    - output_path_lock: Context manager holding an exclusive lock file

Dependencies:
    - portalocker: Cross-platform file locking
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Generator

import portalocker

from docscan_toolkit.core.errors import WriteError

logger = logging.getLogger(__name__)


def lock_path_for(output_path: Path) -> Path:
    """Lock file guarding an output path (``<name>.lock`` beside it)."""
    output_path = Path(output_path)
    return output_path.with_name(output_path.name + ".lock")


@contextmanager
def output_path_lock(
    output_path: Path,
    *,
    wait: bool = True,
) -> Generator[Path, None, None]:
    """
    Hold an exclusive lock for an output path.
    
    Args:
        output_path: Document path about to be (re)written.
        wait: Block until a competing holder releases (False = fail fast).
        
    Yields:
        The lock file path.
        
    Raises:
        WriteError: If the lock file cannot be created, or the lock
            cannot be acquired without waiting.
        
    Example:
        >>> with output_path_lock(path):
        ...     assemble(images, path)
    """
    output_path = Path(output_path)
    lock_path = lock_path_for(output_path)
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(output_path, str(e)) from e
    
    flags = portalocker.LOCK_EX
    if not wait:
        flags |= portalocker.LOCK_NB
    
    f = _acquire(output_path, lock_path, flags)
    logger.debug(f"Acquired lock {lock_path.name}")
    try:
        yield lock_path
    finally:
        # Removed while still held; a waiter that locked the old inode
        # notices and retries on a fresh file.
        try:
            lock_path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Left lock file {lock_path}: {e}")
        portalocker.unlock(f)
        f.close()
        logger.debug(f"Released lock {lock_path.name}")


def _acquire(output_path: Path, lock_path: Path, flags: portalocker.LockFlags) -> IO[str]:
    """Lock the file currently at lock_path, retrying if a holder removed it."""
    while True:
        try:
            f = open(lock_path, "a", encoding="utf-8")
        except OSError as e:
            raise WriteError(output_path, str(e)) from e
        try:
            portalocker.lock(f, flags)
        except portalocker.exceptions.LockException as e:
            f.close()
            raise WriteError(output_path, "output path is locked by another assembly") from e
        if _is_current(f, lock_path):
            return f
        portalocker.unlock(f)
        f.close()


def _is_current(f: IO[str], lock_path: Path) -> bool:
    try:
        return os.path.samestat(os.fstat(f.fileno()), os.stat(lock_path))
    except FileNotFoundError:
        return False
