"""Receiving pushed git repositories and running the pre-receive hook."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from collections.abc import Callable
from pathlib import Path
from typing import IO, Protocol

_CHUNK = 32 * 1024

_PRE_RECEIVE_HOOK_TEMPLATE = """#!/bin/bash
set -eo pipefail
strip_remote_prefix() {{
    stdbuf -i0 -o0 -e0 sed "s/^/"$'\\e[1G'"/"
}}

GIT_HOME={git_home} \\
SSH_CONNECTION="$SSH_CONNECTION" \\
SSH_ORIGINAL_COMMAND="$SSH_ORIGINAL_COMMAND" \\
REPOSITORY="$RECEIVE_REPO" \\
USERNAME="$RECEIVE_USER" \\
FINGERPRINT="$RECEIVE_FINGERPRINT" \\
POD_NAMESPACE="$POD_NAMESPACE" \\
boot git-receive | strip_remote_prefix
"""

log = logging.getLogger(__name__)

_create_lock = threading.Lock()


class GitReceiveError(Exception):
    """Raised when a repository cannot be received."""


class _Writer(Protocol):
    def write(self, data: bytes) -> object: ...


class _Channel(Protocol):
    stderr: _Writer

    def read(self, size: int) -> bytes: ...

    def write(self, data: bytes) -> object: ...


def render_pre_receive_hook(git_home: str) -> str:
    """Return the pre-receive hook script for the given git home."""
    return _PRE_RECEIVE_HOOK_TEMPLATE.format(git_home=git_home)


def create_pre_receive_hook(git_home: str, repo_path: str) -> None:
    """Write an executable pre-receive hook to repo_path/hooks/pre-receive."""
    write_path = Path(repo_path, "hooks", "pre-receive")
    try:
        write_path.write_text(render_pre_receive_hook(git_home))
    except OSError as exc:
        raise GitReceiveError(
            f"Cannot create pre-receive hook file at {write_path} ({exc})"
        ) from exc
    try:
        write_path.chmod(0o755)
    except OSError as exc:
        raise GitReceiveError(
            f"Cannot change pre-receive hook script permissions ({exc})"
        ) from exc


def create_repo(repo_path: str) -> bool:
    """Create a bare repository at repo_path unless one is there.

    Returns True if it was created, False if the directory already existed.
    """
    with _create_lock:
        path = Path(repo_path)
        if path.is_dir():
            log.debug("Directory %s already exists.", repo_path)
            return False
        if path.exists():
            raise GitReceiveError("Expected directory, found file")
        log.debug("Creating new directory at %s", repo_path)
        path.mkdir(mode=0o755, parents=True)
        try:
            result = subprocess.run(
                ["git", "init", "--bare"],
                cwd=repo_path,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as exc:
            raise GitReceiveError(str(exc)) from exc
        if result.returncode != 0:
            log.info("git init output: %s", result.stdout)
            raise GitReceiveError(f"git init exited with status {result.returncode}")
        return True


def _pump(source: IO[bytes], *sinks: Callable[[bytes], object]) -> None:
    for chunk in iter(lambda: source.read1(_CHUNK), b""):  # type: ignore[attr-defined]
        for sink in sinks:
            sink(chunk)


def receive(
    repo: str,
    operation: str,
    git_home: str,
    channel: _Channel,
    fingerprint: str,
    username: str,
    conndata: str,
    receivetype: str,
) -> None:
    """Receive a pushed repository through git-shell and its pre-receive hook.

    Only git-receive-pack is supported. With receivetype "mock" the channel
    just gets "OK".
    """
    log.info(
        "receiving git repo name: %s, operation: %s, fingerprint: %s, user: %s",
        repo, operation, fingerprint, username,
    )
    if receivetype == "mock":
        channel.write(b"OK")
        return

    repo_path = os.path.join(git_home, repo)
    log.info("creating repo directory %s", repo_path)
    try:
        create_repo(repo_path)
    except (OSError, GitReceiveError) as exc:
        raise GitReceiveError(f"Did not create new repo ({exc})") from exc

    log.info("writing pre-receive hook under %s", repo_path)
    try:
        create_pre_receive_hook(git_home, repo_path)
    except GitReceiveError as exc:
        raise GitReceiveError(f"Did not write pre-receive hook ({exc})") from exc

    original_command = f"{operation} '{repo}'"
    args = ["git-shell", "-c", original_command]
    log.info(" ".join(args))
    env = {
        "RECEIVE_USER": username,
        "RECEIVE_REPO": repo,
        "RECEIVE_FINGERPRINT": fingerprint,
        "SSH_ORIGINAL_COMMAND": original_command,
        "SSH_CONNECTION": conndata,
    }
    env.update(os.environ)
    log.debug("Working Dir: %s", git_home)

    try:
        proc = subprocess.Popen(
            args, cwd=git_home, env=env,
            stdin=subprocess.PIPE, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
        )
    except OSError as exc:
        raise GitReceiveError(f"Failed to start git pre-receive hook: {exc} ()") from exc

    errbuf = bytearray()
    pumps = [
        threading.Thread(target=_pump, args=(proc.stdout, channel.write), daemon=True),
        threading.Thread(
            target=_pump, args=(proc.stderr, channel.stderr.write, errbuf.extend), daemon=True
        ),
    ]
    for pump in pumps:
        pump.start()

    assert proc.stdin is not None
    try:
        for chunk in iter(lambda: channel.read(_CHUNK), b""):
            proc.stdin.write(chunk)
        proc.stdin.close()
    except OSError as exc:
        proc.kill()
        proc.wait()
        for pump in pumps:
            pump.join()
        raise GitReceiveError(
            f"Failed to write git objects into the git pre-receive hook ({exc})"
        ) from exc

    print("Waiting for git-receive to run.")
    print("Waiting for deploy.")
    returncode = proc.wait()
    for pump in pumps:
        pump.join()
    err_text = errbuf.decode("utf-8", errors="replace")
    if returncode != 0:
        raise GitReceiveError(
            f"Failed to run git pre-receive hook: {err_text} (exit status {returncode})"
        )
    if errbuf:
        log.error("Unreported error: %s", err_text)
        raise GitReceiveError(err_text)
    log.info("Deploy complete.")