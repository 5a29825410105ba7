"""Base lock class - the capability every lock implementation provides."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from os import PathLike
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.coordination.config import Settings
    from src.coordination.file_locks import FileLock
    from src.coordination.memory_lock import MemoryLock


@dataclass(eq=False)
class LockResult:
    """Result of a lock acquisition attempt.

    Either holds the lock (``acquired`` is true) or represents a failed
    attempt. The release action is consumed on first use, so releasing a
    token twice, or releasing one that never acquired, does nothing.
    """
    acquired: bool
    _release: Callable[[], None] | None = field(default=None, repr=False)

    def __post_init__(self):
        if self.acquired and self._release is None:
            raise ValueError("An acquired lock needs a release action")
        if not self.acquired:
            self._release = None

    @classmethod
    def held(cls, release: Callable[[], None]) -> "LockResult":
        return cls(True, release)

    @classmethod
    def not_acquired(cls) -> "LockResult":
        return cls(False)

    def is_locked(self) -> bool:
        """Whether this token currently holds the lock."""
        return self._release is not None

    def release(self) -> None:
        """Release the lock if this token still holds it."""
        release, self._release = self._release, None
        if release is not None:
            release()

    def __bool__(self) -> bool:
        return self.is_locked()

    def __enter__(self) -> "LockResult":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


# Names for the blocking and non-blocking outcomes
Locked = LockResult
TryLocked = LockResult


class Lock(ABC):
    """Base class for all locks."""

    @abstractmethod
    def lock(self) -> LockResult:
        """Block until the lock is held."""
        ...

    @abstractmethod
    def try_lock(self) -> LockResult:
        """Attempt to take the lock without blocking."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release resources held by the lock."""
        ...

    def probe(self) -> bool:
        """Report whether the lock is free right now, without keeping it.

        The answer can be stale by the time it is returned; treat it as a hint.
        """
        result = self.try_lock()
        result.release()
        return result.acquired

    def delete(self) -> None:
        """Same as close(); nothing is removed from disk."""
        self.close()

    def await_released(self) -> None:
        """Block until the lock is free, then return without holding it."""
        self.lock().release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @staticmethod
    def file(path: str | PathLike, settings: "Settings | None" = None) -> "FileLock":
        """Open a lock backed by the file at ``path``."""
        from src.coordination.file_locks import FileLock

        return FileLock(path, settings)

    @staticmethod
    def memory() -> "MemoryLock":
        """Create a lock that only coordinates threads of this process."""
        from src.coordination.memory_lock import MemoryLock

        return MemoryLock()
