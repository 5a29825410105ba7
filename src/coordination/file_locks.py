"""File locks - advisory locks shared by every process that opens the same path."""

import fcntl
import logging
import os
import threading
from os import PathLike

import structlog

from src.coordination.base import Lock, LockResult
from src.coordination.config import Settings
from src.coordination.errors import (
    LockAcquireError,
    LockCloseError,
    LockClosedError,
    LockOpenError,
    LockOverlapError,
    LockReleaseError,
)

logger = structlog.wrap_logger(logging.getLogger(__name__))

# Files this process holds or is blocked acquiring, keyed by (st_dev, st_ino).
# flock(2) never reports an overlap within one process, so it is tracked here.
_claimed_files: set[tuple[int, int]] = set()
_claimed_guard = threading.Lock()


def _reset_after_fork() -> None:
    # A forked child holds nothing until it locks through its own FileLock
    global _claimed_guard
    _claimed_guard = threading.Lock()
    _claimed_files.clear()


os.register_at_fork(after_in_child=_reset_after_fork)


class FileLock(Lock):
    """Exclusive advisory lock on a whole file.

    The file is opened read/write (created if missing) for the lifetime of
    the instance and is never written, truncated or deleted.
    """

    def __init__(self, path: str | PathLike, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.path = os.fspath(path)

        try:
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, self.settings.file_mode)
        except OSError as exc:
            raise LockOpenError(f"Cannot open lock file {self.path}: {exc}") from exc

        try:
            st = os.fstat(fd)
        except OSError as exc:
            os.close(fd)
            raise LockOpenError(f"Cannot stat lock file {self.path}: {exc}") from exc

        self._fd = fd
        self._file_id = (st.st_dev, st.st_ino)
        self._claimed_by: int | None = None  # pid that registered the claim
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise LockClosedError(f"Lock file {self.path} is closed")

    def _claim(self) -> bool:
        """Register this file as held by the process; False if it already is."""
        with _claimed_guard:
            if self._file_id in _claimed_files:
                return False
            _claimed_files.add(self._file_id)
            self._claimed_by = os.getpid()
            return True

    def _holds_claim(self) -> bool:
        # Claims inherited across fork() belong to the parent
        return self._claimed_by == os.getpid()

    def _unclaim(self) -> None:
        with _claimed_guard:
            if self._holds_claim():
                _claimed_files.discard(self._file_id)
            self._claimed_by = None

    def lock(self) -> LockResult:
        """Block until this process holds the lock.

        Raises LockOverlapError instead of waiting forever when this process
        already holds, or is already waiting for, the same file.
        """
        self._check_open()
        if not self._claim():
            raise LockOverlapError(
                f"Lock file {self.path} is already held or awaited by this process"
            )

        acquired = False
        try:
            fcntl.flock(self._fd, fcntl.LOCK_EX)
            acquired = True
        except OSError as exc:
            raise LockAcquireError(f"Cannot lock {self.path}: {exc}") from exc
        finally:
            if not acquired:
                self._unclaim()

        logger.debug("Acquired file lock", path=self.path, blocking=True)
        return LockResult.held(self._unlock)

    def try_lock(self) -> LockResult:
        """Attempt to take the lock once, without blocking."""
        self._check_open()
        if not self._claim():
            # Already locked by this process
            logger.debug("File lock held by this process", path=self.path)
            return LockResult.not_acquired()

        acquired = False
        try:
            fcntl.flock(self._fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            acquired = True
        except BlockingIOError:
            logger.debug("File lock held by another process", path=self.path)
            return LockResult.not_acquired()
        except OSError as exc:
            raise LockAcquireError(f"Cannot lock {self.path}: {exc}") from exc
        finally:
            if not acquired:
                self._unclaim()

        logger.debug("Acquired file lock", path=self.path, blocking=False)
        return LockResult.held(self._unlock)

    def _unlock(self) -> None:
        if self._closed or not self._holds_claim():
            # Dropped by close(), or inherited from a parent process
            return
        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        except OSError as exc:
            raise LockReleaseError(f"Cannot unlock {self.path}: {exc}") from exc
        finally:
            self._unclaim()

        logger.debug("Released file lock", path=self.path)

    def close(self) -> None:
        """Drop any held lock and close the descriptor. The file stays on disk."""
        if self._closed:
            return
        self._closed = True

        errors: list[OSError] = []
        if self._holds_claim():
            try:
                fcntl.flock(self._fd, fcntl.LOCK_UN)
            except OSError as exc:
                errors.append(exc)
            finally:
                self._unclaim()

        try:
            os.close(self._fd)
        except OSError as exc:
            errors.append(exc)

        if errors:
            logger.warning(
                "Failed to close lock file cleanly",
                path=self.path,
                error=str(errors[0]),
            )
            raise LockCloseError(f"Cannot close lock file {self.path}: {errors[0]}") from errors[0]

        logger.debug("Closed lock file", path=self.path)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<FileLock {self.path!r} {state}>"
