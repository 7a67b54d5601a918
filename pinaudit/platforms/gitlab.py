"""GitLab REST client (API v4), for gitlab.com and self-hosted instances.

Projects are addressed by their URL-encoded full path, so nested groups
(``group/subgroup/project``) work without an id lookup.
"""

from __future__ import annotations

from datetime import datetime
from urllib.parse import quote

import httpx

from pinaudit.models.probe import CommitInfo
from pinaudit.models.repo import Platform
from pinaudit.platforms.base import RestPlatformClient, parse_timestamp


class GitLabClient(RestPlatformClient):
    """GitLab; the same API serves gitlab.com and GitLab-compatible hosts.

    Parameters
    ----------
    http:
        Shared httpx client.
    base_url:
        Instance root, e.g. ``https://gitlab.com``.  ``/api/v4`` is appended.
    platform:
        Which platform tag this instance answers for.
    """

    def __init__(
        self,
        http: httpx.Client,
        base_url: str = "https://gitlab.com",
        platform: Platform = Platform.GITLAB,
    ) -> None:
        super().__init__(http, f"{base_url.rstrip('/')}/api/v4")
        self.platform = platform

    @staticmethod
    def _project(org: str, repo: str) -> str:
        return quote(f"{org}/{repo}", safe="")

    def _latest_tag(self, org: str, repo: str) -> str | None:
        tags = self._get_json(f"/projects/{self._project(org, repo)}/repository/tags")
        first = self._first(tags, "tags")
        return first.get("name") if first else None

    def _latest_commit(self, org: str, repo: str) -> CommitInfo | None:
        commits = self._get_json(
            f"/projects/{self._project(org, repo)}/repository/commits",
            params={"per_page": 1},
        )
        first = self._first(commits, "commits")
        if first is None:
            return None
        return CommitInfo(
            commit_id=self._field(first, "id"),
            committed_at=parse_timestamp(self._field(first, "committed_date")),
        )

    def _commit_timestamp(self, org: str, repo: str, commit_id: str) -> datetime | None:
        commit = self._get_json(
            f"/projects/{self._project(org, repo)}/repository/commits/{commit_id}"
        )
        return parse_timestamp(self._field(commit, "committed_date"))
