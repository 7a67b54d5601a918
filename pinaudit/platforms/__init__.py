"""Platform clients and the platform → client registry.

All clients implement ``BasePlatformClient``: ``latest_tag``,
``latest_commit`` and ``commit_timestamp``, plus ``probe`` which bundles
whichever of those an engine's configured axes need.  The runner looks a
client up by the coordinate's ``Platform`` and never branches on it.
"""

from __future__ import annotations

import httpx

from pinaudit.config import AuditConfig
from pinaudit.models.repo import Platform
from pinaudit.platforms.base import BasePlatformClient, PlatformError, RestPlatformClient
from pinaudit.platforms.bitbucket import BitbucketClient
from pinaudit.platforms.github import GitHubClient
from pinaudit.platforms.gitlab import GitLabClient
from pinaudit.platforms.sourceforge import SourceForgeClient


def build_http_client(config: AuditConfig) -> httpx.Client:
    """Return the shared HTTP client for all REST platforms."""
    if config.http_timeout_seconds is None:
        return httpx.Client(follow_redirects=True)
    return httpx.Client(follow_redirects=True, timeout=config.http_timeout_seconds)


def build_clients(
    config: AuditConfig,
    http: httpx.Client,
) -> dict[Platform, BasePlatformClient]:
    """Build one client per supported platform."""
    return {
        Platform.GITHUB: GitHubClient(
            http, base_url=config.github_api_url, token=config.github_token
        ),
        Platform.BITBUCKET: BitbucketClient(http, base_url=config.bitbucket_api_url),
        Platform.GITLAB: GitLabClient(http, base_url=config.gitlab_url),
        Platform.GITLAB_COMPATIBLE: GitLabClient(
            http,
            base_url=config.gitlab_compatible_url,
            platform=Platform.GITLAB_COMPATIBLE,
        ),
        Platform.SOURCEFORGE: SourceForgeClient(
            base_url=config.sourceforge_git_url,
            clone_depth=config.sourceforge_clone_depth,
            scratch_dir=config.scratch_dir,
            timeout=config.git_timeout_seconds,
        ),
    }


__all__ = [
    "BasePlatformClient",
    "RestPlatformClient",
    "PlatformError",
    "GitHubClient",
    "BitbucketClient",
    "GitLabClient",
    "SourceForgeClient",
    "build_clients",
    "build_http_client",
]
