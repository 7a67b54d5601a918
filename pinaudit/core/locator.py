"""Repository locator — recovers an engine's upstream from its ``build.sh``.

Engine build scripts are an external, unversioned contract, so the scan
matches them exactly the way they are written::

    git clone https://github.com/acme/widget.git source
    pushd source
    git checkout abc1234

The line ``pushd source`` is the sentinel.  The line before it must be the
``git clone`` command, and the line after it must be a ``git checkout``.
Anything else yields no coordinate, which callers treat as "skip engine".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from urllib.parse import urlsplit

from pinaudit.models.repo import Platform, RepoCoordinate

logger = logging.getLogger(__name__)

SOURCE_SENTINEL = "pushd source"
CLONE_COMMAND = "git clone "
CHECKOUT_COMMAND = "git checkout"

DEFAULT_HOSTS: dict[str, Platform] = {
    "github.com": Platform.GITHUB,
    "bitbucket.org": Platform.BITBUCKET,
    "gitlab.com": Platform.GITLAB,
    "gitlab.freedesktop.org": Platform.GITLAB_COMPATIBLE,
    "git.code.sf.net": Platform.SOURCEFORGE,
}

# Platforms whose repository path may itself contain slashes.
_NESTED_PATH_PLATFORMS = frozenset({Platform.GITLAB_COMPATIBLE, Platform.SOURCEFORGE})


def build_host_map(gitlab_compatible_host: str | None = None) -> dict[str, Platform]:
    """Return the host→platform mapping, honouring a custom self-hosted GitLab."""
    hosts = {
        host: platform
        for host, platform in DEFAULT_HOSTS.items()
        if platform is not Platform.GITLAB_COMPATIBLE
    }
    hosts[gitlab_compatible_host or "gitlab.freedesktop.org"] = Platform.GITLAB_COMPATIBLE
    return hosts


def locate_repo(
    build_script: str,
    hosts: Mapping[str, Platform] = DEFAULT_HOSTS,
) -> RepoCoordinate | None:
    """Return the upstream coordinate declared by *build_script*, or None."""
    lines = build_script.split("\n")
    clone_line: str | None = None
    sentinel_found = False

    for index, line in enumerate(lines):
        if sentinel_found:
            if CHECKOUT_COMMAND not in line:
                logger.debug("No checkout after %r; giving up", SOURCE_SENTINEL)
                return None
            return _coordinate_from_clone_line(clone_line, hosts)

        if line == SOURCE_SENTINEL:
            clone_line = lines[index - 1] if index > 0 else ""
            sentinel_found = True

    logger.debug("Build script has no %r followed by a checkout", SOURCE_SENTINEL)
    return None


def _coordinate_from_clone_line(
    clone_line: str | None,
    hosts: Mapping[str, Platform],
) -> RepoCoordinate | None:
    if not clone_line or CLONE_COMMAND not in clone_line:
        logger.debug("Line before %r is not a clone: %r", SOURCE_SENTINEL, clone_line)
        return None

    arguments = clone_line.split(CLONE_COMMAND, 1)[1].split()
    if not arguments:
        return None
    return parse_clone_url(arguments[0], hosts)


def parse_clone_url(
    clone_url: str,
    hosts: Mapping[str, Platform] = DEFAULT_HOSTS,
) -> RepoCoordinate | None:
    """Map a clone URL onto a platform, organization and repository."""
    parts = urlsplit(clone_url)
    host = (parts.hostname or "").lower()
    platform = hosts.get(host)
    if platform is None:
        logger.debug("Unknown clone host %r in %s", host, clone_url)
        return None

    segments = [segment for segment in parts.path.split("/") if segment]
    if platform is Platform.SOURCEFORGE:
        if segments[:1] != ["p"]:
            logger.debug("SourceForge clone URL %s is not under /p/", clone_url)
            return None
        segments = segments[1:]
    if len(segments) < 2:
        logger.debug("Clone URL %s has no org/repo path", clone_url)
        return None

    organization = segments[0]
    if platform in _NESTED_PATH_PLATFORMS:
        repository = "/".join(segments[1:])
    else:
        repository = segments[1]
    repository = repository.removesuffix(".git")

    return RepoCoordinate(
        platform=platform,
        organization=organization,
        repository=repository,
        clone_url=clone_url,
    )
