"""File system access, real or held in memory."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path


class FakeFileNotFound(LookupError):
    """Raised by FakeFS when a requested file is not present."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"Fake file {filename} not found")
        self.filename = filename


class RealFS:
    """Operates on the local file system."""

    def read_file(self, name: str) -> bytes:
        """Return the contents of the named file."""
        return Path(name).read_bytes()

    def remove_all(self, name: str) -> None:
        """Remove a file or a directory tree; a missing path is not an error."""
        path = Path(name)
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)


@dataclass
class FakeFS:
    """An in-memory file system keyed by file name."""

    files: dict[str, bytes] = field(default_factory=dict)

    def read_file(self, name: str) -> bytes:
        """Return the stored contents, raising FakeFileNotFound if absent."""
        try:
            return self.files[name]
        except KeyError:
            raise FakeFileNotFound(name) from None

    def remove_all(self, name: str) -> None:
        """Remove the stored file, raising FakeFileNotFound if absent."""
        try:
            del self.files[name]
        except KeyError:
            raise FakeFileNotFound(name) from None