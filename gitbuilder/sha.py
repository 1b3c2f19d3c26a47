"""Validated git commit hashes."""

from __future__ import annotations

import re
from dataclasses import dataclass

SHORT_SHA_LENGTH = 8

_SHA_PATTERN = re.compile(r"[0-9a-f]{40}")


class InvalidGitSha(ValueError):
    """Raised when a string is not a full lowercase hex git sha."""

    def __init__(self, sha: str) -> None:
        super().__init__(f"git sha {sha} was invalid")
        self.sha = sha


@dataclass(frozen=True)
class Sha:
    """A full git sha together with its short form."""

    full: str
    short: str


def new_sha(raw_sha: str) -> Sha:
    """Validate raw_sha and return it as a Sha."""
    if not _SHA_PATTERN.fullmatch(raw_sha):
        raise InvalidGitSha(raw_sha)
    return Sha(full=raw_sha, short=raw_sha[:SHORT_SHA_LENGTH])