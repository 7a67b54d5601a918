"""Platform client base class.

Every hosting platform implements the same three lookups.  Errors never
leave a client: each public lookup catches ``PlatformError``, logs it and
returns ``None`` so one flaky host cannot abort the audit.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx

from pinaudit.core.staleness import hashes_match
from pinaudit.models.probe import CommitInfo, VersionProbe
from pinaudit.models.repo import Platform

logger = logging.getLogger(__name__)


class PlatformError(RuntimeError):
    """Raised inside a client when a platform lookup fails."""


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO 8601 timestamp as returned by the hosting APIs and git."""
    if not isinstance(value, str) or not value:
        raise PlatformError(f"Missing timestamp: {value!r}")
    try:
        # fromisoformat only accepts a trailing "Z" from Python 3.11 on
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise PlatformError(f"Unparseable timestamp {value!r}") from exc


class BasePlatformClient(ABC):
    """Common contract for a version-control hosting platform."""

    platform: Platform

    # ------------------------------------------------------------------
    # Lookups (never raise)
    # ------------------------------------------------------------------

    def latest_tag(self, org: str, repo: str) -> str | None:
        """Return the most recent tag name, or None if unavailable."""
        try:
            return self._latest_tag(org, repo)
        except (PlatformError, ValueError) as exc:  # ValueError covers model validation
            logger.warning("%s: tag lookup failed for %s/%s: %s", self.platform.value, org, repo, exc)
            return None

    def latest_commit(self, org: str, repo: str) -> CommitInfo | None:
        """Return the newest commit on the default branch, or None."""
        try:
            return self._latest_commit(org, repo)
        except (PlatformError, ValueError) as exc:
            logger.warning("%s: commit lookup failed for %s/%s: %s", self.platform.value, org, repo, exc)
            return None

    def commit_timestamp(self, org: str, repo: str, commit_id: str) -> datetime | None:
        """Return the commit timestamp of *commit_id*, or None if it cannot be resolved."""
        try:
            return self._commit_timestamp(org, repo, commit_id)
        except (PlatformError, ValueError) as exc:
            logger.warning(
                "%s: cannot resolve commit %s in %s/%s: %s",
                self.platform.value, commit_id, org, repo, exc,
            )
            return None

    def probe(
        self,
        org: str,
        repo: str,
        *,
        check_tag: bool = False,
        pinned_hash: str | None = None,
    ) -> VersionProbe:
        """Fetch whatever the caller's configured axes need.

        The pinned commit's own timestamp is only looked up when the latest
        commit does not already match the pin.
        """
        latest_tag = self.latest_tag(org, repo) if check_tag else None

        latest: CommitInfo | None = None
        pinned_date: datetime | None = None
        if pinned_hash:
            latest, pinned_date = self._probe_commits(org, repo, pinned_hash)

        return VersionProbe(
            latest_tag=latest_tag,
            latest_commit_id=latest.commit_id if latest else None,
            latest_commit_date=latest.committed_at if latest else None,
            pinned_commit_date=pinned_date,
        )

    def _probe_commits(
        self, org: str, repo: str, pinned_hash: str
    ) -> tuple[CommitInfo | None, datetime | None]:
        latest = self.latest_commit(org, repo)
        if latest is None or hashes_match(pinned_hash, latest.commit_id):
            return latest, None
        return latest, self.commit_timestamp(org, repo, pinned_hash)

    # ------------------------------------------------------------------
    # Platform implementations (raise PlatformError)
    # ------------------------------------------------------------------

    @abstractmethod
    def _latest_tag(self, org: str, repo: str) -> str | None: ...

    @abstractmethod
    def _latest_commit(self, org: str, repo: str) -> CommitInfo | None: ...

    @abstractmethod
    def _commit_timestamp(self, org: str, repo: str, commit_id: str) -> datetime | None: ...


class RestPlatformClient(BasePlatformClient):
    """A platform reached over a JSON REST API through a shared httpx client.

    Parameters
    ----------
    http:
        Shared ``httpx.Client``; thread-safe, so one instance serves every
        worker.
    base_url:
        API root, without a trailing slash.
    """

    def __init__(self, http: httpx.Client, base_url: str) -> None:
        self._http = http
        self.base_url = base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {}

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._http.get(url, params=params, headers=self._headers())
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise PlatformError(f"GET {url} returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise PlatformError(f"GET {url} failed: {exc}") from exc
        except ValueError as exc:
            raise PlatformError(f"GET {url} returned invalid JSON") from exc

    @staticmethod
    def _first(items: Any, what: str) -> dict[str, Any] | None:
        """Return the first element of a JSON list, None when it is empty."""
        if not isinstance(items, list):
            raise PlatformError(f"Expected a list of {what}, got {type(items).__name__}")
        if not items:
            return None
        if not isinstance(items[0], dict):
            raise PlatformError(f"Malformed {what} entry: {items[0]!r}")
        return items[0]

    @staticmethod
    def _field(data: Any, *path: str) -> Any:
        """Walk nested JSON objects, raising PlatformError on a missing key."""
        current = data
        for key in path:
            if not isinstance(current, dict) or key not in current:
                raise PlatformError(f"Response is missing {'.'.join(path)}")
            current = current[key]
        return current
