"""GitHub REST client.

Tag lookup prefers the latest *release* and falls back to the newest tag
in the tag list on any failure of the release call, whatever its cause
(no releases, rate limiting, a network blip).
"""

from __future__ import annotations

import logging
from datetime import datetime

import httpx

from pinaudit.models.probe import CommitInfo
from pinaudit.models.repo import Platform
from pinaudit.platforms.base import PlatformError, RestPlatformClient, parse_timestamp

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


class GitHubClient(RestPlatformClient):
    """GitHub, authenticated with a single forwarded token when one is set."""

    platform = Platform.GITHUB

    def __init__(
        self,
        http: httpx.Client,
        base_url: str = "https://api.github.com",
        token: str = "",
    ) -> None:
        super().__init__(http, base_url)
        self._token = token

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _latest_tag(self, org: str, repo: str) -> str | None:
        try:
            release = self._get_json(f"/repos/{org}/{repo}/releases/latest")
        except PlatformError as exc:
            logger.debug("github: no latest release for %s/%s (%s); using tag list", org, repo, exc)
            tags = self._get_json(f"/repos/{org}/{repo}/tags")
            first = self._first(tags, "tags")
            return first.get("name") if first else None

        tag_name = release.get("tag_name") if isinstance(release, dict) else None
        return tag_name or None

    def _latest_commit(self, org: str, repo: str) -> CommitInfo | None:
        commits = self._get_json(f"/repos/{org}/{repo}/commits", params={"per_page": 1})
        first = self._first(commits, "commits")
        if first is None:
            return None
        return CommitInfo(
            commit_id=self._field(first, "sha"),
            committed_at=parse_timestamp(self._field(first, "commit", "committer", "date")),
        )

    def _commit_timestamp(self, org: str, repo: str, commit_id: str) -> datetime | None:
        commit = self._get_json(f"/repos/{org}/{repo}/commits/{commit_id}")
        return parse_timestamp(self._field(commit, "commit", "committer", "date"))
