"""pinaudit data models — all Pydantic v2, all frozen (immutable)."""

from pinaudit.models.engine import EngineDescriptor
from pinaudit.models.issues import AuditResult, HashIssue, Issue, TagIssue
from pinaudit.models.probe import CommitInfo, VersionProbe
from pinaudit.models.repo import Platform, RepoCoordinate

__all__ = [
    # engine
    "EngineDescriptor",
    # repo
    "Platform",
    "RepoCoordinate",
    # probe
    "CommitInfo",
    "VersionProbe",
    # issues
    "TagIssue",
    "HashIssue",
    "Issue",
    "AuditResult",
]
