"""Builder key and object storage credentials read from mounted secrets."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Protocol

STORAGE_CRED_LOCATION = "/var/run/secrets/deis/objectstore/creds/"
BUILDER_KEY_LOCATION = "/var/run/secrets/api/auth/builder-key"
MINIO_HOST_ENV_VAR = "DEIS_MINIO_SERVICE_HOST"
MINIO_PORT_ENV_VAR = "DEIS_MINIO_SERVICE_PORT"
GCS_KEY = "key.json"


class _Env(Protocol):
    def get(self, name: str) -> str: ...


def get_builder_key(location: str = BUILDER_KEY_LOCATION) -> str:
    """Return the key used as a token towards the controller."""
    try:
        raw = Path(location).read_text()
    except OSError as exc:
        raise OSError(f"couldn't get builder key from {location} ({exc})") from exc
    return raw.strip("\n")


def get_storage_params(env: _Env, cred_location: str = STORAGE_CRED_LOCATION) -> dict[str, Any]:
    """Return the parameters for connecting to object storage.

    Every regular file in cred_location becomes a parameter named after it;
    a GCS key file is passed by path as ``keyfile``.
    """
    params: dict[str, Any] = {}
    with os.scandir(cred_location) as entries:
        files = sorted(entries, key=lambda entry: entry.name)
    for entry in files:
        if entry.is_dir(follow_symlinks=False) or entry.name == "..data":
            continue
        path = os.path.join(cred_location, entry.name)
        data = Path(path).read_bytes()
        if entry.name == GCS_KEY:
            params["keyfile"] = path
        else:
            params[entry.name] = data.decode("utf-8", errors="replace")
    params["bucket"] = params.get("builder-bucket")
    params["container"] = params.get("builder-container")
    if env.get("BUILDER_STORAGE") == "minio":
        host = env.get(MINIO_HOST_ENV_VAR)
        port = env.get(MINIO_PORT_ENV_VAR)
        params["regionendpoint"] = f"http://{host}:{port}"
        params["secure"] = False
        params["region"] = "us-east-1"
    return params