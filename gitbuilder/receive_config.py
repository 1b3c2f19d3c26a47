"""Configuration of the git-receive hook, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

BUILDER_POD_TICK_MSEC = 100
OBJECT_STORAGE_TICK_MSEC = 500

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _parse_bool(raw: str) -> bool:
    if raw in _TRUE_WORDS:
        return True
    if raw in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean {raw!r}")


# attribute, environment variable, converter, required
_FIELDS: tuple[tuple[str, str, Callable[[str], Any], bool], ...] = (
    ("controller_host", "DEIS_CONTROLLER_SERVICE_HOST", str, True),
    ("controller_port", "DEIS_CONTROLLER_SERVICE_PORT", str, True),
    ("registry_host", "DEIS_REGISTRY_SERVICE_HOST", str, True),
    ("registry_port", "DEIS_REGISTRY_SERVICE_PORT", str, True),
    ("registry_proxy_port", "DEIS_REGISTRY_PROXY_PORT", str, False),
    ("registry_location", "DEIS_REGISTRY_LOCATION", str, False),
    ("registry_secret_prefix", "DEIS_REGISTRY_SECRET_PREFIX", str, False),
    ("git_home", "GIT_HOME", str, True),
    ("ssh_connection", "SSH_CONNECTION", str, True),
    ("ssh_original_command", "SSH_ORIGINAL_COMMAND", str, True),
    ("repository", "REPOSITORY", str, True),
    ("username", "USERNAME", str, True),
    ("fingerprint", "FINGERPRINT", str, True),
    ("pod_namespace", "POD_NAMESPACE", str, True),
    ("storage_region", "STORAGE_REGION", str, False),
    ("debug", "DEIS_DEBUG", _parse_bool, False),
    ("builder_pod_tick_duration_msec", "BUILDER_POD_TICK_DURATION", int, False),
    ("builder_pod_wait_duration_msec", "BUILDER_POD_WAIT_DURATION", int, False),
    ("object_storage_tick_duration_msec", "OBJECT_STORAGE_TICK_DURATION", int, False),
    ("object_storage_wait_duration_msec", "OBJECT_STORAGE_WAIT_DURATION", int, False),
    ("session_idle_interval_msec", "SESSION_IDLE_INTERVAL", int, False),
    ("slug_builder_image", "SLUGBUILDER_IMAGE_NAME", str, True),
    ("docker_builder_image", "DOCKERBUILDER_IMAGE_NAME", str, True),
    ("slug_builder_image_pull_policy", "SLUG_BUILDER_IMAGE_PULL_POLICY", str, False),
    ("docker_builder_image_pull_policy", "DOCKER_BUILDER_IMAGE_PULL_POLICY", str, False),
    ("storage_type", "BUILDER_STORAGE", str, False),
    ("builder_pod_node_selector", "BUILDER_POD_NODE_SELECTOR", str, False),
)


@dataclass
class ReceiveConfig:
    """Settings for the git-receive hook.

    Durations are held in milliseconds and returned in seconds.
    """

    controller_host: str = ""
    controller_port: str = ""
    registry_host: str = ""
    registry_port: str = ""
    registry_proxy_port: str = "5555"
    registry_location: str = "on-cluster"
    registry_secret_prefix: str = "private-registry"
    git_home: str = ""
    ssh_connection: str = ""
    ssh_original_command: str = ""
    repository: str = ""
    username: str = ""
    fingerprint: str = ""
    pod_namespace: str = ""
    storage_region: str = "us-east-1"
    debug: bool = False
    builder_pod_tick_duration_msec: int = 100
    builder_pod_wait_duration_msec: int = 900000
    object_storage_tick_duration_msec: int = 500
    object_storage_wait_duration_msec: int = 300000
    session_idle_interval_msec: int = 10000
    slug_builder_image: str = ""
    docker_builder_image: str = ""
    slug_builder_image_pull_policy: str = "Always"
    docker_builder_image_pull_policy: str = "Always"
    storage_type: str = "minio"
    builder_pod_node_selector: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ReceiveConfig:
        """Build a config from environment variables, applying defaults."""
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for attr, var, convert, required in _FIELDS:
            raw = environ.get(var)
            if raw is None:
                if required:
                    raise ValueError(f"required key {var} missing value")
                continue
            try:
                values[attr] = convert(raw)
            except ValueError as exc:
                raise ValueError(f"invalid value {raw!r} for {var}") from exc
        return cls(**values)

    def app(self) -> str:
        """Return the repository name with its last '.' and beyond removed."""
        head, dot, _ = self.repository.rpartition(".")
        return head if dot else self.repository

    def builder_pod_tick_duration(self) -> float:
        """Seconds between checks for the end of a builder pod."""
        return self.builder_pod_tick_duration_msec / 1000

    def builder_pod_wait_duration(self) -> float:
        """Longest time, in seconds, to wait for a builder pod."""
        return self.builder_pod_wait_duration_msec / 1000

    def object_storage_tick_duration(self) -> float:
        """Seconds between checks on an object storage operation."""
        return self.object_storage_tick_duration_msec / 1000

    def object_storage_wait_duration(self) -> float:
        """Longest time, in seconds, to wait on an object storage operation."""
        return self.object_storage_wait_duration_msec / 1000

    def session_idle_interval(self) -> float:
        """Seconds between progress messages while waiting."""
        return self.session_idle_interval_msec / 1000

    def check_durations(self) -> None:
        """Reset tick durations that are too small or not below their wait."""
        if self.builder_pod_tick_duration_msec >= self.builder_pod_wait_duration_msec:
            self.builder_pod_tick_duration_msec = BUILDER_POD_TICK_MSEC
        if self.builder_pod_tick_duration_msec < BUILDER_POD_TICK_MSEC:
            self.builder_pod_tick_duration_msec = BUILDER_POD_TICK_MSEC

        if self.object_storage_tick_duration_msec >= self.object_storage_wait_duration_msec:
            self.object_storage_tick_duration_msec = OBJECT_STORAGE_TICK_MSEC
        if self.object_storage_tick_duration_msec < OBJECT_STORAGE_TICK_MSEC:
            self.object_storage_tick_duration_msec = OBJECT_STORAGE_TICK_MSEC