"""Shared test fixtures for pinaudit."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from pinaudit.config import AuditConfig
from pinaudit.core.catalog import EngineCatalog
from pinaudit.models.probe import CommitInfo
from pinaudit.models.repo import Platform
from pinaudit.platforms.base import BasePlatformClient, PlatformError


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's tokens and PINAUDIT_* settings out of the tests."""
    for key in ("GITHUB_TOKEN", "INPUT_TOKEN", "GITHUB_OUTPUT", "GITHUB_ACTIONS"):
        monkeypatch.delenv(key, raising=False)
    for key in list(os.environ):
        if key.startswith("PINAUDIT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def engines_dir(tmp_path: Path) -> Path:
    """Provide an empty engines/ directory."""
    root = tmp_path / "engines"
    root.mkdir()
    return root


def build_script(clone_url: str, checkout: str = "git checkout abc1234") -> str:
    """Render a build.sh in the shape the locator expects."""
    return "\n".join([
        "#!/bin/bash",
        "set -e",
        f"git clone {clone_url} source",
        "pushd source",
        checkout,
        "make -j4",
        "popd",
        "",
    ])


@pytest.fixture
def make_engine(engines_dir: Path) -> Callable[..., Path]:
    """Factory fixture: write an engine folder with env.json and build.sh."""

    def _factory(
        name: str,
        env: dict[str, Any] | None = None,
        clone_url: str | None = "https://github.com/acme/widget.git",
        script: str | None = None,
    ) -> Path:
        folder = engines_dir / name
        folder.mkdir()
        if env is not None:
            (folder / "env.json").write_text(json.dumps(env), encoding="utf-8")
        if script is None and clone_url is not None:
            script = build_script(clone_url)
        if script is not None:
            (folder / "build.sh").write_text(script, encoding="utf-8")
        return folder

    return _factory


@pytest.fixture
def catalog(engines_dir: Path) -> EngineCatalog:
    return EngineCatalog(engines_dir)


@pytest.fixture
def config(engines_dir: Path) -> AuditConfig:
    """A sequential config pointed at the temp engines directory."""
    return AuditConfig(engines_path=engines_dir, max_workers=1, _env_file=None)


class FakeClient(BasePlatformClient):
    """A platform client answering from canned data and recording calls.

    ``commit_dates`` maps commit ids (full or abbreviated) to timestamps;
    a missing id behaves like an unresolvable pin.  Set ``fail=True`` to
    make every lookup raise ``PlatformError``.
    """

    def __init__(
        self,
        platform: Platform = Platform.GITHUB,
        tag: str | None = None,
        latest: CommitInfo | None = None,
        commit_dates: dict[str, datetime] | None = None,
        fail: bool = False,
    ) -> None:
        self.platform = platform
        self.tag = tag
        self.latest = latest
        self.commit_dates = commit_dates or {}
        self.fail = fail
        self.calls: list[tuple[str, ...]] = []

    def _check_fail(self) -> None:
        if self.fail:
            raise PlatformError("boom")

    def _latest_tag(self, org: str, repo: str) -> str | None:
        self.calls.append(("latest_tag", org, repo))
        self._check_fail()
        return self.tag

    def _latest_commit(self, org: str, repo: str) -> CommitInfo | None:
        self.calls.append(("latest_commit", org, repo))
        self._check_fail()
        return self.latest

    def _commit_timestamp(self, org: str, repo: str, commit_id: str) -> datetime | None:
        self.calls.append(("commit_timestamp", org, repo, commit_id))
        self._check_fail()
        if commit_id not in self.commit_dates:
            raise PlatformError(f"unknown commit {commit_id}")
        return self.commit_dates[commit_id]

    def called(self, method: str) -> bool:
        return any(call[0] == method for call in self.calls)


@pytest.fixture
def make_client() -> type[FakeClient]:
    """Factory fixture: the FakeClient class, for building canned platforms."""
    return FakeClient
