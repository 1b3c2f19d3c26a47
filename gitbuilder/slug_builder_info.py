"""Object storage keys used by the slug builder."""

from __future__ import annotations

from dataclasses import dataclass

SLUG_TGZ_NAME = "slug.tgz"
CACHE_KEY_PATTERN = "home/{}/cache"
GIT_KEY_PATTERN = "home/{}:git-{}"


def cache_key_for(app_name: str) -> str:
    """Return the cache key of an application."""
    return CACHE_KEY_PATTERN.format(app_name)


def git_key_for(app_name: str, short_sha: str) -> str:
    """Return the base key of one build of an application."""
    return GIT_KEY_PATTERN.format(app_name, short_sha)


@dataclass(frozen=True)
class SlugBuilderInfo:
    """The object storage locations for one slug build."""

    app_name: str
    short_sha: str
    disable_caching: bool = False

    @property
    def tar_key(self) -> str:
        """Folder from which the slug builder downloads the source tarball."""
        return f"{git_key_for(self.app_name, self.short_sha)}/tar"

    @property
    def push_key(self) -> str:
        """Folder into which the slug builder uploads the slug."""
        return f"{git_key_for(self.app_name, self.short_sha)}/push"

    @property
    def cache_key(self) -> str:
        """Per-application cache location, kept between deploys."""
        return cache_key_for(self.app_name)

    def absolute_slug_object_key(self) -> str:
        """Return the push key plus the slug's file name."""
        return f"{self.push_key}/{SLUG_TGZ_NAME}"

    def absolute_procfile_key(self) -> str:
        """Return the push key plus the Procfile name."""
        return f"{self.push_key}/Procfile"