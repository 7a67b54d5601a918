"""Engine pin descriptor — the contents of an engine's ``env.json``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EngineDescriptor(BaseModel):
    """Pin specification for a single engine.

    Loaded from the engine's ``env.json``.  Only the four pin keys are
    read; any other build variables in the file are ignored.

    An axis (tag or commit) is checked only when its pin is present and
    its freeze flag is unset.  An engine with no checkable axis is
    skipped entirely.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = ""
    commit_tag: str | None = Field(default=None, alias="COMMIT_TAG")
    commit_hash: str | None = Field(default=None, alias="COMMIT_HASH")
    tag_freeze: bool | None = Field(default=None, alias="COMMIT_TAG_FREEZE")
    hash_freeze: bool | None = Field(default=None, alias="COMMIT_HASH_FREEZE")

    @property
    def check_tag(self) -> bool:
        """Whether the tag axis should be checked."""
        return bool(self.commit_tag) and not self.tag_freeze

    @property
    def check_hash(self) -> bool:
        """Whether the commit axis should be checked."""
        return bool(self.commit_hash) and not self.hash_freeze

    @property
    def is_skipped(self) -> bool:
        """True when neither axis is checkable."""
        return not (self.check_tag or self.check_hash)
