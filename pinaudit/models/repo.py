"""Upstream repository identity resolved from a build script."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Platform(str, Enum):
    """Supported version-control hosting platforms."""

    GITHUB = "github"
    BITBUCKET = "bitbucket"
    GITLAB = "gitlab"
    GITLAB_COMPATIBLE = "gitlab-compatible"
    SOURCEFORGE = "sourceforge"


class RepoCoordinate(BaseModel):
    """Where an engine's upstream lives.

    Derived once per engine from its ``build.sh``.  ``repository`` may
    contain slashes for GitLab subgroups and SourceForge sub-repositories.
    """

    model_config = ConfigDict(frozen=True)

    platform: Platform
    organization: str
    repository: str
    clone_url: str = ""

    @property
    def slug(self) -> str:
        return f"{self.organization}/{self.repository}"
