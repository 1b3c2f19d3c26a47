"""Access to environment variables, real or held in memory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


class RealEnv:
    """Reads variables from the process environment on every call."""

    def get(self, name: str) -> str:
        """Return the variable's value, or an empty string if it is unset."""
        return os.environ.get(name, "")


@dataclass
class FakeEnv:
    """An environment backed by a dictionary."""

    envs: dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        """Return the stored value, or an empty string if there is none."""
        return self.envs.get(name, "")