"""A thread-safe two-state circuit used as a readiness indicator."""

from __future__ import annotations

import threading
from enum import IntEnum


class CircuitState(IntEnum):
    """State of a Circuit: OPEN is non-functional, CLOSED is functional."""

    OPEN = 0
    CLOSED = 1

    def __str__(self) -> str:
        return self.name


class Circuit:
    """A point-in-time functionality indicator, created open."""

    def __init__(self) -> None:
        self._state = CircuitState.OPEN
        self._mutex = threading.Lock()

    def state(self) -> CircuitState:
        """Return the current state."""
        with self._mutex:
            return self._state

    def _swap(self, expected: CircuitState, new: CircuitState) -> bool:
        with self._mutex:
            if self._state != expected:
                return False
            self._state = new
            return True

    def close(self) -> bool:
        """Close the circuit; return False if it was already closed."""
        return self._swap(CircuitState.OPEN, CircuitState.CLOSED)

    def open(self) -> bool:
        """Open the circuit; return False if it was already open."""
        return self._swap(CircuitState.CLOSED, CircuitState.OPEN)