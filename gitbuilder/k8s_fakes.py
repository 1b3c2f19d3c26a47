"""In-memory stand-ins for the Kubernetes secrets client."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

Secret = dict[str, Any]


def _require(fn: Callable[..., Any] | None, what: str) -> Callable[..., Any]:
    if fn is None:
        raise RuntimeError(f"no {what} function configured")
    return fn


@dataclass
class FakeSecret:
    """A secrets client whose get, create and update delegate to callables."""

    fn_get: Callable[[str], Secret] | None = None
    fn_create: Callable[[Secret], Secret] | None = None
    fn_update: Callable[[Secret], Secret] | None = None
    deleted: list[str] = field(default_factory=list)

    def get(self, name: str) -> Secret:
        """Return fn_get(name)."""
        return _require(self.fn_get, "get")(name)

    def delete(self, name: str) -> None:
        """Accept the deletion, recording the name in deleted."""
        self.deleted.append(name)

    def create(self, secret: Secret) -> Secret:
        """Return fn_create(secret)."""
        return _require(self.fn_create, "create")(secret)

    def update(self, secret: Secret) -> Secret:
        """Return fn_update(secret)."""
        return _require(self.fn_update, "update")(secret)

    def list(self) -> list[Secret]:
        """Return an empty list of secrets."""
        return []


@dataclass
class FakeSecretsNamespacer:
    """Hands out secrets clients per namespace through fn."""

    fn: Callable[[str], Any]

    def secrets(self, namespace: str) -> Any:
        """Return fn(namespace)."""
        return self.fn(namespace)