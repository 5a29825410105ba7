"""Memory lock - a Lock that only coordinates threads of one process."""

import logging
import threading

import structlog

from src.coordination.base import Lock, LockResult
from src.coordination.errors import LockClosedError, LockOverlapError

logger = structlog.wrap_logger(logging.getLogger(__name__))


class MemoryLock(Lock):
    """In-process lock with the same reentrancy rules as FileLock.

    Useful as a stand-in for FileLock when everything runs in one process.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._owner: int | None = None  # thread ident of the holder
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise LockClosedError("Memory lock is closed")

    def lock(self) -> LockResult:
        self._check_open()
        if self._owner == threading.get_ident():
            raise LockOverlapError("Memory lock is already held by this thread")

        self._lock.acquire()
        self._owner = threading.get_ident()
        logger.debug("Acquired memory lock", blocking=True)
        return LockResult.held(self._unlock)

    def try_lock(self) -> LockResult:
        self._check_open()
        if not self._lock.acquire(blocking=False):
            return LockResult.not_acquired()

        self._owner = threading.get_ident()
        logger.debug("Acquired memory lock", blocking=False)
        return LockResult.held(self._unlock)

    def _unlock(self) -> None:
        if self._owner is None:
            return
        self._owner = None
        self._lock.release()
        logger.debug("Released memory lock")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._unlock()
