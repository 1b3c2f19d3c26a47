"""Helpers for the SSH front end that accepts git pushes."""

from __future__ import annotations

import hashlib
import logging
import struct
from typing import Protocol

MULTIPLE_PUSH = "Another git push is ongoing"

log = logging.getLogger(__name__)


class RepoNameError(ValueError):
    """Raised when a repository name given to a git command is not acceptable."""


class _Writer(Protocol):
    def write(self, data: bytes) -> object: ...


class _Channel(Protocol):
    def write(self, data: bytes) -> object: ...

    def send_request(self, name: str, want_reply: bool, payload: bytes) -> object: ...


def fingerprint(key_blob: bytes) -> str:
    """Return the colon-separated MD5 fingerprint of a wire-format public key."""
    digest = hashlib.md5(key_blob).hexdigest()
    return ":".join(digest[i : i + 2] for i in range(0, len(digest), 2))


def _split_host_port(addr: str | tuple) -> tuple[str, str]:
    if isinstance(addr, (tuple, list)):
        return str(addr[0]), str(addr[1])
    if addr.startswith("["):
        close = addr.find("]")
        if close < 0 or not addr[close + 1 :].startswith(":"):
            return "", ""
        return addr[1:close], addr[close + 2 :]
    host, sep, port = addr.rpartition(":")
    if not sep or ":" in host:
        return "", ""
    return host, port


def ssh_connection(remote: str | tuple, local: str | tuple) -> str:
    """Return the SSH_CONNECTION value for a connection's two endpoints.

    Each endpoint is a "host:port" string or a (host, port, ...) tuple.
    """
    rhost, rport = _split_host_port(remote)
    lhost, lport = _split_host_port(local)
    return f"{rhost} {rport} {lhost} {lport}"


def clean_exec(payload: bytes) -> str:
    """Decode an exec request's command string and strip risky characters.

    A malformed payload yields an empty command.
    """
    if len(payload) < 4:
        return ""
    (length,) = struct.unpack(">I", payload[:4])
    data = payload[4 : 4 + length]
    if len(data) < length:
        return ""
    command = data.decode("utf-8", errors="replace")
    return command.replace("$", "").replace("`", "'")


def clean_repo_name(name: str) -> str:
    """Clean a repository name taken from a git command line."""
    if not name:
        raise RepoNameError("empty repo name")
    if ".." in name:
        raise RepoNameError("cannot change directory in file name")
    name = name.replace("'", "")
    name = name.removesuffix(".git")
    return name.removeprefix("/")


def git_pkt_line(writer: _Writer, s: str) -> None:
    """Write s to writer as one line of git's pkt-line protocol."""
    data = s.encode("utf-8")
    writer.write(b"%04x" % (len(data) + 4) + data)


def _exit_status_payload(status: int) -> bytes:
    return struct.pack(">I", status)


def _send_exit_status(channel: _Channel) -> None:
    # The server always reports a zero exit status to the client.
    channel.send_request("exit-status", False, _exit_status_payload(0))


def ping(channel: _Channel) -> None:
    """Answer a ping exec with "pong" and a zero exit status."""
    log.info("PING")
    try:
        channel.write(b"pong")
    except OSError as exc:
        log.error("Failed to write to channel: %s", exc)
    _send_exit_status(channel)