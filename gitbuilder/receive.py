"""Reading the ref updates that git hands to a pre-receive hook."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class RefUpdate:
    """One updated ref: the old revision, the new one and the ref's name."""

    old_rev: str
    new_rev: str
    ref_name: str


def read_line(line: str) -> RefUpdate:
    """Parse a line of the form "<old-rev> <new-rev> <ref-name>"."""
    parts = line.split(" ")
    if len(parts) != 3:
        raise ValueError(f"malformed line [{line}]")
    return RefUpdate(*parts)


def iter_ref_updates(lines: Iterable[str]) -> Iterator[RefUpdate]:
    """Yield a RefUpdate for each line, such as those read from standard input."""
    for raw in lines:
        line = raw.removesuffix("\n").removesuffix("\r")
        try:
            yield read_line(line)
        except ValueError as exc:
            raise ValueError(f"reading STDIN ({exc})") from exc