"""Audit output models — issues and the per-run result matrix."""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class TagIssue(BaseModel):
    """A newer upstream tag is available."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    engine_name: str = Field(serialization_alias="engineName")
    new_tag: str = Field(serialization_alias="newTag")
    old_tag: str = Field(serialization_alias="oldTag")


class HashIssue(BaseModel):
    """A newer upstream commit is available (hashes are 7-char prefixes)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    engine_name: str = Field(serialization_alias="engineName")
    new_hash: str = Field(serialization_alias="newHash")
    old_hash: str = Field(serialization_alias="oldHash")


Issue = Union[TagIssue, HashIssue]


class AuditResult(BaseModel):
    """Everything a single audit pass produced."""

    model_config = ConfigDict(frozen=True)

    issues: list[Issue] = []
    checked: int = 0
    skipped: int = 0
    failed: int = 0

    def to_matrix(self) -> dict[str, Any]:
        """Return the CI job matrix: ``{"include": [...]}`` or ``{}``."""
        if not self.issues:
            return {}
        return {"include": [issue.model_dump(by_alias=True) for issue in self.issues]}
