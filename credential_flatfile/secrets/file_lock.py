# credential_flatfile/secrets/file_lock.py
"""Advisory inter-process lock on a sidecar file, acquired with a timeout."""

import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog

from .errors import LockError, LockTimeoutError

logger = structlog.get_logger(__name__)

LOCK_SUFFIX = ".lock"
POLL_INTERVAL = 0.05

if sys.platform == "win32":
    import msvcrt

    def _try_lock(fd: int) -> bool:
        os.lseek(fd, 0, os.SEEK_SET)
        try:
            msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)
        except OSError:
            return False
        return True

    def _unlock(fd: int) -> None:
        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)

else:
    import errno
    import fcntl

    def _try_lock(fd: int) -> bool:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as exc:
            if exc.errno in (errno.EAGAIN, errno.EACCES):
                return False
            raise
        return True

    def _unlock(fd: int) -> None:
        fcntl.flock(fd, fcntl.LOCK_UN)


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + LOCK_SUFFIX)


@contextmanager
def file_lock(path: Path, timeout: float) -> Iterator[None]:
    """
    Holds an exclusive lock tied to *path* for the duration of the context.

    The lock lives on a sibling ``.lock`` file so the data file itself can be
    replaced while the lock is held. Acquisition polls a non-blocking attempt
    until *timeout* seconds have passed.

    Raises:
        LockTimeoutError: Another process held the lock for the whole timeout.
        LockError: The lock file could not be opened or locked.
    """
    lock_path = lock_path_for(path)
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(str(lock_path), os.O_CREAT | os.O_RDWR, 0o600)
    except OSError as exc:
        raise LockError(str(exc)) from exc

    try:
        deadline = time.monotonic() + timeout
        while True:
            try:
                acquired = _try_lock(fd)
            except OSError as exc:
                raise LockError(str(exc)) from exc
            if acquired:
                break
            if time.monotonic() >= deadline:
                raise LockTimeoutError(timeout)
            time.sleep(POLL_INTERVAL)

        logger.debug("Lock acquired", lock_path=str(lock_path))
        try:
            yield
        finally:
            _unlock(fd)
            logger.debug("Lock released", lock_path=str(lock_path))
    finally:
        os.close(fd)
