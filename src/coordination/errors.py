"""Lock errors - failures that propagate to the caller."""


class LockError(Exception):
    """Base lock exception."""


class LockOpenError(LockError):
    """Raised when the lock file cannot be opened or created."""


class LockAcquireError(LockError):
    """Raised when acquiring a lock fails for a reason other than contention."""


class LockOverlapError(LockAcquireError):
    """Raised when a blocking acquire would wait on a lock this process already holds."""


class LockReleaseError(LockError):
    """Raised when a held lock cannot be released."""


class LockCloseError(LockError):
    """Raised when the lock handle cannot be closed cleanly."""


class LockClosedError(LockError):
    """Raised when a lock is used after close()."""
