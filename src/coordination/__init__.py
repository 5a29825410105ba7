"""Coordination layer - cross-process advisory locks."""

from .base import Lock, Locked, LockResult, TryLocked
from .config import Settings
from .errors import (
    LockAcquireError,
    LockCloseError,
    LockClosedError,
    LockError,
    LockOpenError,
    LockOverlapError,
    LockReleaseError,
)
from .file_locks import FileLock
from .logs import configure_logging
from .memory_lock import MemoryLock

__all__ = [
    "FileLock",
    "Lock",
    "LockAcquireError",
    "LockCloseError",
    "LockClosedError",
    "LockError",
    "LockOpenError",
    "LockOverlapError",
    "LockReleaseError",
    "LockResult",
    "Locked",
    "MemoryLock",
    "Settings",
    "TryLocked",
    "configure_logging",
]
