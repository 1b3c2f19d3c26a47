"""Object storage helpers and in-memory stand-ins for storage drivers."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol


class PathNotFoundError(LookupError):
    """Raised by a storage driver when an object does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path not found: {path}")
        self.path = path


class _ObjectStatter(Protocol):
    def stat(self, path: str) -> Any: ...


@dataclass
class FakeObjectStatter:
    """A statter that records each path and delegates to fn."""

    fn: Callable[[str], Any]
    calls: list[str] = field(default_factory=list)

    def stat(self, path: str) -> Any:
        """Record the call and return fn(path)."""
        self.calls.append(path)
        return self.fn(path)


@dataclass
class FakeObjectGetter:
    """A getter that records each path and delegates to fn."""

    fn: Callable[[str], bytes]
    calls: list[str] = field(default_factory=list)

    def get_content(self, path: str) -> bytes:
        """Record the call and return fn(path)."""
        self.calls.append(path)
        return self.fn(path)


def object_exists(statter: _ObjectStatter, obj_key: str) -> bool:
    """Return whether obj_key exists; errors other than not-found propagate."""
    try:
        statter.stat(obj_key)
    except PathNotFoundError:
        return False
    return True


def wait_for_object(statter: _ObjectStatter, obj_key: str, tick: float, timeout: float) -> None:
    """Check for obj_key now, every tick seconds, and once more at timeout.

    Raises TimeoutError if the object has not appeared by then.
    """

    def present() -> bool:
        try:
            return object_exists(statter, obj_key)
        except Exception:
            return False

    if present():
        return
    start = time.monotonic()
    deadline = start + timeout
    next_tick = start + tick
    while next_tick < deadline:
        time.sleep(max(0.0, next_tick - time.monotonic()))
        if present():
            return
        next_tick += tick
    time.sleep(max(0.0, deadline - time.monotonic()))
    if present():
        return
    raise TimeoutError(f"Object {obj_key} didn't exist after {timeout}s")