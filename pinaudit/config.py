"""Audit configuration — env-driven.

Centralized config using pydantic-settings.  Reads from a .env file and
PINAUDIT_* environment variables; the GitHub token is additionally picked
up from ``GITHUB_TOKEN`` or the Actions-style ``INPUT_TOKEN``.

The config is constructed once and passed explicitly into the
``AuditRunner``; there is no module-level singleton.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuditConfig(BaseSettings):
    """Settings for one audit run.

    Examples
    --------
    Override via environment::

        export PINAUDIT_ENGINES_PATH=packages/engines
        export PINAUDIT_GITHUB_TOKEN=ghp_...
        export PINAUDIT_MAX_WORKERS=1

    Or via .env file::

        PINAUDIT_LOG_LEVEL=DEBUG
        PINAUDIT_GITLAB_COMPATIBLE_URL=https://gitlab.gnome.org
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PINAUDIT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Inputs
    engines_path: Path = Path("engines")
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices(
            "PINAUDIT_GITHUB_TOKEN", "GITHUB_TOKEN", "INPUT_TOKEN", "github_token"
        ),
    )

    # Platform endpoints
    github_api_url: str = "https://api.github.com"
    bitbucket_api_url: str = "https://api.bitbucket.org/2.0"
    gitlab_url: str = "https://gitlab.com"
    gitlab_compatible_url: str = "https://gitlab.freedesktop.org"
    sourceforge_git_url: str = "https://git.code.sf.net"

    # Staleness rules
    staleness_window_days: int = 7

    # Execution
    max_workers: int = 4
    http_timeout_seconds: float | None = None  # None keeps the httpx default
    git_timeout_seconds: float | None = None   # None waits for git to finish

    # SourceForge scratch clones
    sourceforge_clone_depth: int = 100
    scratch_dir: Path | None = None  # None uses the system temp dir

    # Observability
    log_level: str = "INFO"

    @property
    def staleness_window(self) -> timedelta:
        return timedelta(days=self.staleness_window_days)

    @property
    def gitlab_compatible_host(self) -> str:
        """Host name of the self-hosted GitLab instance."""
        return urlsplit(self.gitlab_compatible_url).hostname or ""
