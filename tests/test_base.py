"""Tests for the lock base class and tokens."""

from unittest.mock import MagicMock

import pytest

from src.coordination import Lock, Locked, LockResult, TryLocked


class TestLockResult:
    """Test acquisition tokens."""

    def test_held(self):
        """A held token reports locked and calls its release action once."""
        release = MagicMock()
        token = LockResult.held(release)

        assert token.acquired
        assert token.is_locked()
        assert token

        token.release()
        token.release()

        release.assert_called_once_with()
        assert token.acquired
        assert not token.is_locked()

    def test_not_acquired(self):
        """A failed attempt is falsy and releasing it does nothing."""
        token = LockResult.not_acquired()

        assert not token.acquired
        assert not token.is_locked()
        assert not token
        token.release()

    def test_not_acquired_drops_release_action(self):
        """A release action given to a failed attempt is never called."""
        release = MagicMock()
        token = LockResult(False, release)

        token.release()

        release.assert_not_called()

    def test_acquired_needs_release_action(self):
        """An acquired token without a release action is rejected."""
        with pytest.raises(ValueError):
            LockResult(True)

    def test_context_manager(self):
        """Leaving the with block releases the token."""
        release = MagicMock()

        with LockResult.held(release) as token:
            assert token.is_locked()

        release.assert_called_once_with()

    def test_aliases(self):
        """Locked and TryLocked name the same token type."""
        assert Locked is LockResult
        assert TryLocked is LockResult


class TestLock:
    """Test behavior shared by all locks."""

    def test_abstract(self):
        """Lock cannot be instantiated directly."""
        with pytest.raises(TypeError):
            Lock()

    def test_probe_releases_acquired(self):
        """probe releases what it acquired and reports success."""
        release = MagicMock()

        class StubLock(Lock):
            def lock(self):
                return LockResult.held(release)

            def try_lock(self):
                return LockResult.held(release)

            def close(self):
                pass

        assert StubLock().probe()
        release.assert_called_once_with()

    def test_delete_closes(self):
        """delete defaults to close."""
        closed = MagicMock()

        class StubLock(Lock):
            def lock(self):
                return LockResult.not_acquired()

            def try_lock(self):
                return LockResult.not_acquired()

            def close(self):
                closed()

        StubLock().delete()
        closed.assert_called_once_with()
