"""Audit runner — the central coordinator for one staleness pass.

For each engine: load its pin descriptor, locate its upstream repository,
ask the matching platform client what is latest, and run the answers
through the staleness rules.  Every per-engine failure is contained; only
a failure to enumerate engines at all propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor

import httpx

from pinaudit.config import AuditConfig
from pinaudit.core.catalog import EngineCatalog
from pinaudit.core.locator import build_host_map, locate_repo
from pinaudit.core.staleness import hashes_match, is_commit_stale, is_tag_stale, short_hash
from pinaudit.models.engine import EngineDescriptor
from pinaudit.models.issues import AuditResult, HashIssue, Issue, TagIssue
from pinaudit.models.probe import VersionProbe
from pinaudit.models.repo import Platform
from pinaudit.platforms import BasePlatformClient, build_clients, build_http_client

logger = logging.getLogger(__name__)

_CHECKED = "checked"
_SKIPPED = "skipped"
_FAILED = "failed"


class AuditRunner:
    """Runs a full audit over the engines of a catalog.

    Parameters
    ----------
    config:
        Audit configuration (token, endpoints, window, workers).
    catalog:
        Engine source.  Defaults to ``EngineCatalog(config.engines_path)``.
    clients:
        Platform → client mapping.  Built from *config* if not provided, in
        which case the runner owns (and closes) the shared HTTP client.
    """

    def __init__(
        self,
        config: AuditConfig,
        *,
        catalog: EngineCatalog | None = None,
        clients: Mapping[Platform, BasePlatformClient] | None = None,
    ) -> None:
        self.config = config
        self.catalog = catalog or EngineCatalog(config.engines_path)
        self.hosts = build_host_map(config.gitlab_compatible_host)

        self._http: httpx.Client | None = None
        if clients is None:
            self._http = build_http_client(config)
            clients = build_clients(config, self._http)
        self.clients: Mapping[Platform, BasePlatformClient] = clients

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> AuditRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, engine_names: Iterable[str] | None = None) -> AuditResult:
        """Audit every engine and return the accumulated issues.

        Engines are checked concurrently by up to ``config.max_workers``
        threads; issues are reported in enumeration order.

        Raises
        ------
        CatalogError
            If no engine list is given and the catalog cannot be listed.
        """
        names = list(engine_names) if engine_names is not None else self.catalog.engine_names()
        workers = max(1, self.config.max_workers)
        logger.info("Auditing %d engines with %d workers", len(names), workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pinaudit") as pool:
            outcomes = list(pool.map(self._check_contained, names))

        issues: list[Issue] = []
        counts = {_CHECKED: 0, _SKIPPED: 0, _FAILED: 0}
        for status, engine_issues in outcomes:
            counts[status] += 1
            issues.extend(engine_issues)

        logger.info(
            "Audit complete: %d checked, %d skipped, %d failed, %d issues",
            counts[_CHECKED], counts[_SKIPPED], counts[_FAILED], len(issues),
        )
        return AuditResult(
            issues=issues,
            checked=counts[_CHECKED],
            skipped=counts[_SKIPPED],
            failed=counts[_FAILED],
        )

    def _check_contained(self, name: str) -> tuple[str, list[Issue]]:
        try:
            issues = self.check_engine(name)
        except Exception as exc:  # noqa: BLE001
            logger.error("Engine %s: check failed: %s", name, exc)
            return _FAILED, []
        if issues is None:
            return _SKIPPED, []
        return _CHECKED, issues

    # ------------------------------------------------------------------
    # Single engine
    # ------------------------------------------------------------------

    def check_engine(self, name: str) -> list[Issue] | None:
        """Check one engine.  Returns its issues, or None if it was skipped."""
        descriptor = self.catalog.load_descriptor(name)
        if descriptor is None:
            logger.debug("Engine %s: no pin descriptor; skipping", name)
            return None
        if descriptor.is_skipped:
            logger.debug("Engine %s: nothing to check (unpinned or frozen)", name)
            return None

        script = self.catalog.read_build_script(name)
        coordinate = locate_repo(script, self.hosts) if script is not None else None
        if coordinate is None:
            logger.warning("Engine %s: no upstream repository found in build script; skipping", name)
            return None

        client = self.clients.get(coordinate.platform)
        if client is None:
            logger.warning("Engine %s: no client for platform %s; skipping", name, coordinate.platform.value)
            return None

        logger.info(
            "Engine %s: checking %s on %s", name, coordinate.slug, coordinate.platform.value
        )
        probe = client.probe(
            coordinate.organization,
            coordinate.repository,
            check_tag=descriptor.check_tag,
            pinned_hash=descriptor.commit_hash if descriptor.check_hash else None,
        )

        issues: list[Issue] = []
        tag_issue = self._evaluate_tag(descriptor, probe)
        if tag_issue is not None:
            issues.append(tag_issue)
        hash_issue = self._evaluate_commit(descriptor, probe)
        if hash_issue is not None:
            issues.append(hash_issue)
        return issues

    def _evaluate_tag(self, descriptor: EngineDescriptor, probe: VersionProbe) -> TagIssue | None:
        name = descriptor.name
        if not descriptor.check_tag or descriptor.commit_tag is None:
            return None
        if probe.latest_tag is None:
            logger.info("Engine %s: no tag data this run", name)
            return None
        if not is_tag_stale(probe.latest_tag, descriptor.commit_tag):
            return None
        logger.info("Engine %s: tag %s -> %s", name, descriptor.commit_tag, probe.latest_tag)
        return TagIssue(engine_name=name, new_tag=probe.latest_tag, old_tag=descriptor.commit_tag)

    def _evaluate_commit(self, descriptor: EngineDescriptor, probe: VersionProbe) -> HashIssue | None:
        name = descriptor.name
        pinned = descriptor.commit_hash
        if not descriptor.check_hash or pinned is None:
            return None
        if not probe.has_commit:
            logger.info("Engine %s: no commit data this run", name)
            return None
        if hashes_match(pinned, probe.latest_commit_id):
            return None
        if probe.pinned_commit_date is None:
            logger.warning(
                "Engine %s: pinned commit %s could not be resolved; skipping commit check",
                name, pinned,
            )
            return None
        if not is_commit_stale(
            pinned,
            probe.latest_commit_id,
            probe.pinned_commit_date,
            probe.latest_commit_date,
            window=self.config.staleness_window,
        ):
            return None
        logger.info(
            "Engine %s: commit %s -> %s", name, short_hash(pinned), short_hash(probe.latest_commit_id)
        )
        return HashIssue(
            engine_name=name,
            new_hash=short_hash(probe.latest_commit_id),
            old_hash=short_hash(pinned),
        )
