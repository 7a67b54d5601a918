"""SourceForge client — plain git, since SourceForge exposes no tag/commit API.

Tags come from ``git ls-remote``, ordered by git itself
(``--sort=version:refname``), so the newest tag is the last one listed.
Commit lookups need a shallow scratch clone; every clone lives in its own
``mkdtemp`` directory and is removed before the lookup returns, whether it
succeeded or not.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from pinaudit.core.staleness import hashes_match
from pinaudit.models.probe import CommitInfo
from pinaudit.models.repo import Platform
from pinaudit.platforms.base import BasePlatformClient, PlatformError, parse_timestamp

logger = logging.getLogger(__name__)

GitRunner = Callable[[list[str]], str]

_SCRATCH_PREFIX = "pinaudit-sf-"

# git must fail instead of waiting on a credential prompt
_GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


def run_git(args: list[str], timeout: float | None = None) -> str:
    """Run ``git`` with *args* and return its stdout, raising PlatformError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
            env={**os.environ, **_GIT_ENV},
        )
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        raise PlatformError(f"git {args[0]} failed: {detail}") from exc
    except (subprocess.SubprocessError, OSError) as exc:
        raise PlatformError(f"git {args[0]} failed: {exc}") from exc
    return result.stdout


class SourceForgeClient(BasePlatformClient):
    """SourceForge git hosting (``https://git.code.sf.net/p/<project>/<repo>``).

    Parameters
    ----------
    base_url:
        Git host root.
    clone_depth:
        Depth of the shallow scratch clone.  A pin older than this many
        commits cannot be resolved and its commit axis is skipped.
    scratch_dir:
        Parent directory for scratch clones; the system temp dir if None.
    git:
        Callable that runs git with a list of arguments and returns stdout.
        Defaults to :func:`run_git`.
    """

    platform = Platform.SOURCEFORGE

    def __init__(
        self,
        base_url: str = "https://git.code.sf.net",
        clone_depth: int = 100,
        scratch_dir: Path | None = None,
        git: GitRunner | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.clone_depth = clone_depth
        self.scratch_dir = scratch_dir
        self._git: GitRunner = git or (lambda args: run_git(args, timeout=timeout))

    def repo_url(self, org: str, repo: str) -> str:
        """Return the git URL of *org/repo*; SourceForge serves every project under ``/p/``."""
        return f"{self.base_url}/p/{org}/{repo}"

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def _latest_tag(self, org: str, repo: str) -> str | None:
        output = self._git([
            "ls-remote", "--tags", "--refs", "--sort=version:refname", self.repo_url(org, repo),
        ])
        tags = [
            line.split("\t", 1)[1].removeprefix("refs/tags/")
            for line in output.splitlines()
            if "\trefs/tags/" in line
        ]
        if not tags:
            return None
        return tags[-1]

    # ------------------------------------------------------------------
    # Commits (scratch clone)
    # ------------------------------------------------------------------

    @contextmanager
    def scratch_clone(self, org: str, repo: str) -> Iterator[Path]:
        """Shallow-clone *org/repo* into a private directory, removed on exit."""
        if self.scratch_dir is not None:
            self.scratch_dir.mkdir(parents=True, exist_ok=True)
        workdir = Path(tempfile.mkdtemp(prefix=_SCRATCH_PREFIX, dir=self.scratch_dir))
        try:
            clone_path = workdir / "repo.git"
            self._git([
                "clone", "--bare", "--quiet",
                "--depth", str(self.clone_depth),
                self.repo_url(org, repo), str(clone_path),
            ])
            yield clone_path
        finally:
            shutil.rmtree(workdir, ignore_errors=True)
            logger.debug("sourceforge: removed scratch clone %s", workdir)

    def _head_commit(self, clone_path: Path) -> CommitInfo:
        output = self._git(["-C", str(clone_path), "log", "-1", "--format=%H %cI"]).strip()
        commit_id, _, stamp = output.partition(" ")
        if not commit_id:
            raise PlatformError("scratch clone has no commits")
        return CommitInfo(commit_id=commit_id, committed_at=parse_timestamp(stamp))

    def _resolve_timestamp(self, clone_path: Path, commit_id: str) -> datetime:
        full_id = self._git([
            "-C", str(clone_path), "rev-parse", "--verify", "--quiet", f"{commit_id}^{{commit}}",
        ]).strip()
        if not full_id:
            raise PlatformError(f"commit {commit_id} not found within depth {self.clone_depth}")
        stamp = self._git(["-C", str(clone_path), "show", "-s", "--format=%cI", full_id])
        return parse_timestamp(stamp.strip())

    def _latest_commit(self, org: str, repo: str) -> CommitInfo | None:
        with self.scratch_clone(org, repo) as clone_path:
            return self._head_commit(clone_path)

    def _commit_timestamp(self, org: str, repo: str, commit_id: str) -> datetime | None:
        with self.scratch_clone(org, repo) as clone_path:
            return self._resolve_timestamp(clone_path, commit_id)

    def _probe_commits(
        self, org: str, repo: str, pinned_hash: str
    ) -> tuple[CommitInfo | None, datetime | None]:
        # One clone serves both lookups.
        try:
            with self.scratch_clone(org, repo) as clone_path:
                latest = self._head_commit(clone_path)
                if hashes_match(pinned_hash, latest.commit_id):
                    return latest, None
                try:
                    return latest, self._resolve_timestamp(clone_path, pinned_hash)
                except (PlatformError, ValueError) as exc:
                    logger.warning(
                        "sourceforge: cannot resolve commit %s in %s/%s: %s",
                        pinned_hash, org, repo, exc,
                    )
                    return latest, None
        except (PlatformError, ValueError) as exc:
            logger.warning("sourceforge: commit lookup failed for %s/%s: %s", org, repo, exc)
            return None, None
