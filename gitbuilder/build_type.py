"""Choosing between a buildpack and a Dockerfile build."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any


class BuildType(str, Enum):
    """How an application is built."""

    PROCFILE = "procfile"
    DOCKERFILE = "dockerfile"

    def __str__(self) -> str:
        return self.value


def get_build_type(dir_name: str, config_values: Mapping[str, Any] | None = None) -> BuildType:
    """Decide the build type from the files in dir_name and the app config.

    With both a Dockerfile and a Procfile, HEPHY_BUILDER in the config picks
    the type; otherwise the file present decides, defaulting to procfile.
    """
    directory = Path(dir_name)
    has_dockerfile = (directory / "Dockerfile").exists()
    has_procfile = (directory / "Procfile").exists()
    if has_dockerfile and has_procfile:
        chosen = (config_values or {}).get("HEPHY_BUILDER")
        if isinstance(chosen, str):
            try:
                return BuildType(chosen)
            except ValueError:
                pass
    elif has_procfile:
        return BuildType.PROCFILE
    elif has_dockerfile:
        return BuildType.DOCKERFILE
    return BuildType.PROCFILE