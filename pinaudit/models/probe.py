"""Transient answers from platform clients."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CommitInfo(BaseModel):
    """A commit id and its (timezone-aware) commit timestamp."""

    model_config = ConfigDict(frozen=True)

    commit_id: str
    committed_at: datetime


class VersionProbe(BaseModel):
    """What a platform reports as latest for one repository.

    ``pinned_commit_date`` is only populated when the pinned commit had to
    be looked up, i.e. when it does not already match the latest commit.
    """

    model_config = ConfigDict(frozen=True)

    latest_tag: str | None = None
    latest_commit_id: str | None = None
    latest_commit_date: datetime | None = None
    pinned_commit_date: datetime | None = None

    @property
    def has_commit(self) -> bool:
        return self.latest_commit_id is not None and self.latest_commit_date is not None
