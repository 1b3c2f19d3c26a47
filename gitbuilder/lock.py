"""Per-repository locks that keep git operations from overlapping."""

from __future__ import annotations

import contextlib
import queue
import threading
from collections.abc import Callable
from typing import Protocol, TypeVar

T = TypeVar("T")


class RepositoryLockError(Exception):
    """Base class for repository lock failures."""


class AlreadyLockedError(RepositoryLockError):
    """Raised when a repository is already locked."""


class LockTimeoutError(RepositoryLockError):
    """Raised when a locked operation runs past the lock's timeout."""


class _RepositoryLock(Protocol):
    timeout: float

    def lock(self, repo_name: str) -> None: ...

    def unlock(self, repo_name: str) -> None: ...


class InMemoryRepositoryLock:
    """A set of repository names held under a mutex.

    ``timeout`` is how long, in seconds, an operation may hold a lock.
    """

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        self._locked: set[str] = set()
        self._mutex = threading.Lock()

    def lock(self, repo_name: str) -> None:
        """Acquire the lock for repo_name, raising if it is already held."""
        with self._mutex:
            if repo_name in self._locked:
                raise AlreadyLockedError(f'repository "{repo_name}" already locked')
            self._locked.add(repo_name)

    def unlock(self, repo_name: str) -> None:
        """Release the lock for repo_name, raising if it is not held."""
        with self._mutex:
            try:
                self._locked.remove(repo_name)
            except KeyError:
                raise RepositoryLockError(f'repository "{repo_name}" not found') from None


def wrap_in_lock(lck: _RepositoryLock, repo_name: str, fn: Callable[[], T]) -> T:
    """Run fn while holding the lock for repo_name and return its result.

    Raises AlreadyLockedError if the lock is taken and LockTimeoutError if fn
    does not finish within the lock's timeout. The lock is always released.
    """
    try:
        lck.lock(repo_name)
    except RepositoryLockError as exc:
        raise AlreadyLockedError("already locked") from exc

    outcome: queue.Queue[tuple[bool, object]] = queue.Queue(maxsize=1)

    def worker() -> None:
        try:
            outcome.put((True, fn()))
        except Exception as exc:  # handed back to the caller below
            outcome.put((False, exc))

    threading.Thread(target=worker, daemon=True).start()
    try:
        try:
            ok, value = outcome.get(timeout=lck.timeout)
        except queue.Empty:
            raise LockTimeoutError(f"{repo_name} lock exceeded timeout") from None
    finally:
        with contextlib.suppress(RepositoryLockError):
            lck.unlock(repo_name)
    if ok:
        return value  # type: ignore[return-value]
    raise value  # type: ignore[misc]