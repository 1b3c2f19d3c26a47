"""Removes local repositories and stored objects of deleted applications."""

from __future__ import annotations

import logging
import os
import re
import time
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from gitbuilder.slug_builder_info import cache_key_for, git_key_for

DOT_GIT_SUFFIX = ".git"

log = logging.getLogger(__name__)


class _StorageDriver(Protocol):
    def stat(self, path: str) -> Any: ...

    def delete(self, path: str) -> None: ...

    def list(self, path: str) -> Iterable[str]: ...


class _NamespaceLister(Protocol):
    def list(self) -> Iterable[str]: ...


class _FS(Protocol):
    def remove_all(self, name: str) -> None: ...


def local_dirs(git_home: str, filter_fn: Callable[[str], bool]) -> list[str]:
    """Return the names of directories directly under git_home accepted by filter_fn."""
    with os.scandir(git_home) as entries:
        names = sorted(
            entry.name
            for entry in entries
            if entry.name not in ("", ".") and entry.is_dir(follow_symlinks=False)
        )
    return [name for name in names if filter_fn(name)]


def get_diff(namespaces: Iterable[str], dirs: Iterable[str]) -> list[str]:
    """Return the lowercased dirs with no namespace of the same name."""
    known = {name.lower() for name in namespaces}
    return [name.lower() for name in dirs if name.lower() not in known]


def strip_suffixes(strs: Iterable[str], suffix: str) -> list[str]:
    """Cut each string at the last occurrence of suffix."""
    stripped = []
    for value in strs:
        idx = value.rfind(suffix)
        stripped.append(value[:idx] if idx >= 0 else value)
    return stripped


def dir_has_git_suffix(dir_name: str) -> bool:
    """Return whether dir_name ends in '.git'."""
    return dir_name.endswith(DOT_GIT_SUFFIX)


def delete_from_object_store(app: str, storage_driver: _StorageDriver) -> None:
    """Delete the application's cache and build objects from storage."""
    cache_key = cache_key_for(app)
    try:
        storage_driver.stat(cache_key)
    except Exception:
        pass
    else:
        log.info("Cleaner deleting cache %s for app %s", cache_key, app)
        storage_driver.delete(cache_key)

    objects = storage_driver.list("home")
    # listed paths carry a leading slash
    pattern = re.compile("/" + git_key_for(re.escape(app), ".{8}"))
    for obj in objects:
        if pattern.fullmatch(obj):
            log.info("Cleaner deleting slug %s for app %s", obj, app)
            storage_driver.delete(obj)


def _clean_once(
    git_home: str, ns_lister: _NamespaceLister, fs: _FS, storage_driver: _StorageDriver
) -> None:
    try:
        namespaces = list(ns_lister.list())
    except Exception as exc:
        log.error("Cleaner error listing namespaces (%s)", exc)
        return
    try:
        git_dirs = local_dirs(git_home, dir_has_git_suffix)
    except OSError as exc:
        log.error("Cleaner error listing local git directories (%s)", exc)
        return

    for app in get_diff(namespaces, strip_suffixes(git_dirs, DOT_GIT_SUFFIX)):
        dir_to_delete = os.path.join(git_home, app + DOT_GIT_SUFFIX)
        try:
            fs.remove_all(dir_to_delete)
        except Exception as exc:
            log.error(
                "Cleaner error removing local files for deleted app %s (%s)", dir_to_delete, exc
            )
        try:
            delete_from_object_store(app, storage_driver)
        except Exception as exc:
            log.error(
                "Cleaner error removing object store files for deleted app %s (%s)", app, exc
            )


def run(
    git_home: str,
    ns_lister: _NamespaceLister,
    fs: _FS,
    poll_sleep_duration: float,
    storage_driver: _StorageDriver,
    iterations: int | None = None,
) -> None:
    """Repeatedly remove apps whose namespace no longer exists.

    Runs forever unless iterations is given; errors are logged, not raised.
    """
    done = 0
    while iterations is None or done < iterations:
        _clean_once(git_home, ns_lister, fs, storage_driver)
        done += 1
        time.sleep(poll_sleep_duration)