"""Bitbucket Cloud REST client (API 2.0, anonymous)."""

from __future__ import annotations

from datetime import datetime

import httpx

from pinaudit.models.probe import CommitInfo
from pinaudit.models.repo import Platform
from pinaudit.platforms.base import PlatformError, RestPlatformClient, parse_timestamp


class BitbucketClient(RestPlatformClient):
    """Bitbucket; tags are requested sorted newest-target-first."""

    platform = Platform.BITBUCKET

    def __init__(self, http: httpx.Client, base_url: str = "https://api.bitbucket.org/2.0") -> None:
        super().__init__(http, base_url)

    def _latest_tag(self, org: str, repo: str) -> str | None:
        page = self._get_json(
            f"/repositories/{org}/{repo}/refs/tags",
            params={"sort": "-target.date"},
        )
        first = self._first(self._field(page, "values"), "tags")
        return first.get("name") if first else None

    def _latest_commit(self, org: str, repo: str) -> CommitInfo | None:
        repository = self._get_json(f"/repositories/{org}/{repo}")
        branch = self._field(repository, "mainbranch", "name")
        if not isinstance(branch, str) or not branch:
            raise PlatformError(f"{org}/{repo} has no main branch")

        ref = self._get_json(f"/repositories/{org}/{repo}/refs/branches/{branch}")
        return CommitInfo(
            commit_id=self._field(ref, "target", "hash"),
            committed_at=parse_timestamp(self._field(ref, "target", "date")),
        )

    def _commit_timestamp(self, org: str, repo: str, commit_id: str) -> datetime | None:
        commit = self._get_json(f"/repositories/{org}/{repo}/commit/{commit_id}")
        return parse_timestamp(self._field(commit, "date"))
