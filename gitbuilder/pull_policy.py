"""Container image pull policies."""

from __future__ import annotations

from enum import Enum


class PullPolicy(str, Enum):
    """The image pull policies accepted for builder pods."""

    ALWAYS = "Always"
    IF_NOT_PRESENT = "IfNotPresent"
    NEVER = "Never"

    def __str__(self) -> str:
        return self.value


class InvalidPullPolicy(ValueError):
    """Raised when a string names no known pull policy."""

    def __init__(self, value: str) -> None:
        super().__init__(f"{value} is an invalid pull policy")
        self.value = value


def pull_policy_from_string(pp_str: str) -> PullPolicy:
    """Convert pp_str into a PullPolicy, raising InvalidPullPolicy if unknown."""
    try:
        return PullPolicy(pp_str)
    except ValueError:
        raise InvalidPullPolicy(pp_str) from None