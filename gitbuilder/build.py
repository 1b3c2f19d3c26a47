"""Helpers for the build step: commands, node selectors, JSON output and Procfiles."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Protocol

import yaml

from gitbuilder.build_type import BuildType

log = logging.getLogger(__name__)

# Characters the JSON output escapes so it can be embedded in HTML safely.
_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class ProcfileError(ValueError):
    """Raised when a Procfile cannot be read or is malformed."""


class _ObjectGetter(Protocol):
    def get_content(self, path: str) -> bytes: ...


@dataclass
class Command:
    """A program to run with its arguments, working directory and output streams."""

    args: list[str]
    cwd: str | None = None
    stdout: IO[Any] | int | None = field(default=None, repr=False)
    stderr: IO[Any] | int | None = field(default=None, repr=False)


def repo_cmd(repo_dir: str, first: str, *args: str) -> Command:
    """Return a command for first with args, to be run inside repo_dir."""
    return Command(args=[first, *args], cwd=repo_dir)


def run(cmd: Command) -> None:
    """Log the command at debug level, then run it.

    Raises subprocess.CalledProcessError if it exits with a non-zero status.
    """
    cmd_str = " ".join(cmd.args)
    if cmd.cwd:
        log.debug("running [%s] in directory %s", cmd_str, cmd.cwd)
    else:
        log.debug("running [%s]", cmd_str)
    subprocess.run(
        cmd.args,
        cwd=cmd.cwd or None,
        stdout=cmd.stdout,
        stderr=cmd.stderr,
        check=True,
    )


def build_builder_pod_node_selector(config: str) -> dict[str, str]:
    """Parse "key:value,key:value" into a node selector mapping."""
    selector: dict[str, str] = {}
    if not config:
        return selector
    for item in config.split(","):
        parts = item.split(":")
        if len(parts) != 2:
            raise ValueError(f"Invalid BuilderPodNodeSelector value format: {config}")
        key, value = parts
        selector[key.strip()] = value.strip()
    return selector


def pretty_print_json(data: Any) -> str:
    """Return data as JSON indented by two spaces, ending in a newline."""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    for char, escape in _JSON_ESCAPES.items():
        text = text.replace(char, escape)
    return text + "\n"


def _parse_procfile(raw: bytes, where: str) -> dict[str, str]:
    try:
        parsed = yaml.load(raw, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ProcfileError(f"procfile {where} is malformed ({exc})") from exc
    if parsed is None:
        return {}
    if not isinstance(parsed, dict) or not all(
        isinstance(value, str) for value in parsed.values()
    ):
        raise ProcfileError(f"procfile {where} is malformed (not a mapping of process types)")
    return dict(parsed)


def get_proc_file(
    getter: _ObjectGetter, dir_name: str, procfile_key: str, build_type: BuildType
) -> dict[str, str]:
    """Return the process types of an application.

    A Procfile in dir_name wins; otherwise buildpack builds fetch the one the
    buildpack produced from storage, and other builds get no process types.
    """
    local = Path(f"{dir_name}/Procfile")
    if local.exists():
        try:
            raw = local.read_bytes()
        except OSError as exc:
            raise ProcfileError(f"error in reading {dir_name}/Procfile ({exc})") from exc
        return _parse_procfile(raw, f"{dir_name}/ProcFile")
    if build_type != BuildType.PROCFILE:
        return {}
    log.debug("Procfile not present. Getting it from the buildpack")
    try:
        raw = getter.get_content(procfile_key)
    except Exception as exc:
        raise ProcfileError(f"error in reading {procfile_key} ({exc})") from exc
    return _parse_procfile(raw, procfile_key)