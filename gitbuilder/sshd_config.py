"""Configuration of the SSH server, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

# attribute, environment variable, converter, required
_FIELDS = (
    ("controller_host", "DEIS_CONTROLLER_SERVICE_HOST", str, True),
    ("controller_port", "DEIS_CONTROLLER_SERVICE_PORT", str, True),
    ("ssh_host_ip", "SSH_HOST_IP", str, False),
    ("ssh_host_port", "SSH_HOST_PORT", int, False),
    ("health_srv_port", "HEALTH_SERVER_PORT", int, False),
    ("health_srv_test_storage_region", "STORAGE_REGION", str, False),
    ("cleaner_poll_sleep_duration_sec", "CLEANER_POLL_SLEEP_DURATION_SEC", int, False),
    ("storage_type", "BUILDER_STORAGE", str, False),
    ("slug_builder_image_pull_policy", "SLUG_BUILDER_IMAGE_PULL_POLICY", str, False),
    ("docker_builder_image_pull_policy", "DOCKER_BUILDER_IMAGE_PULL_POLICY", str, False),
    ("lock_timeout", "GIT_LOCK_TIMEOUT", int, False),
)


@dataclass
class ServerConfig:
    """Settings for the SSH server, health server and cleaner."""

    controller_host: str
    controller_port: str
    ssh_host_ip: str = "0.0.0.0"
    ssh_host_port: int = 2223
    health_srv_port: int = 8092
    health_srv_test_storage_region: str = "us-east-1"
    cleaner_poll_sleep_duration_sec: int = 5
    storage_type: str = "minio"
    slug_builder_image_pull_policy: str = "Always"
    docker_builder_image_pull_policy: str = "Always"
    lock_timeout: int = 10

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Build a config from environment variables, applying defaults."""
        environ = os.environ if environ is None else environ
        values = {}
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

    def cleaner_poll_sleep_duration(self) -> float:
        """Return the cleaner's poll interval in seconds."""
        return float(self.cleaner_poll_sleep_duration_sec)

    def git_lock_timeout(self) -> float:
        """Return the push lock timeout, configured in minutes, in seconds."""
        return float(self.lock_timeout * 60)