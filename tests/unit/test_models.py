"""Tests for the Pydantic data models — aliases, immutability, skip rules."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from pinaudit.models import (
    AuditResult,
    CommitInfo,
    EngineDescriptor,
    HashIssue,
    Platform,
    RepoCoordinate,
    TagIssue,
    VersionProbe,
)


class TestEngineDescriptor:
    def test_reads_env_json_keys(self):
        descriptor = EngineDescriptor.model_validate({
            "COMMIT_TAG": "v1.0.0",
            "COMMIT_HASH": "abc1234",
            "COMMIT_TAG_FREEZE": True,
        })
        assert descriptor.commit_tag == "v1.0.0"
        assert descriptor.commit_hash == "abc1234"
        assert descriptor.tag_freeze is True
        assert descriptor.hash_freeze is None

    def test_ignores_other_build_variables(self):
        descriptor = EngineDescriptor.model_validate({"COMMIT_TAG": "v1", "CMAKE_FLAGS": "-DX=1"})
        assert descriptor.commit_tag == "v1"

    def test_unpinned_engine_is_skipped(self):
        assert EngineDescriptor().is_skipped is True

    def test_both_frozen_is_skipped(self):
        descriptor = EngineDescriptor.model_validate({
            "COMMIT_TAG": "v1",
            "COMMIT_HASH": "abc",
            "COMMIT_TAG_FREEZE": True,
            "COMMIT_HASH_FREEZE": True,
        })
        assert descriptor.is_skipped is True

    def test_tag_freeze_leaves_hash_axis(self):
        descriptor = EngineDescriptor.model_validate({
            "COMMIT_TAG": "v1",
            "COMMIT_HASH": "abc",
            "COMMIT_TAG_FREEZE": True,
        })
        assert descriptor.check_tag is False
        assert descriptor.check_hash is True
        assert descriptor.is_skipped is False

    def test_frozen_only_axis_is_skipped(self):
        descriptor = EngineDescriptor.model_validate({"COMMIT_TAG": "v1", "COMMIT_TAG_FREEZE": True})
        assert descriptor.is_skipped is True

    def test_null_values_accepted(self):
        descriptor = EngineDescriptor.model_validate({
            "COMMIT_TAG": None,
            "COMMIT_HASH": "abc",
            "COMMIT_HASH_FREEZE": None,
        })
        assert descriptor.check_tag is False
        assert descriptor.check_hash is True

    def test_immutable(self):
        descriptor = EngineDescriptor(commit_tag="v1")
        with pytest.raises(ValidationError):
            descriptor.commit_tag = "v2"


class TestRepoCoordinate:
    def test_slug(self):
        coordinate = RepoCoordinate(platform=Platform.GITLAB, organization="g", repository="sub/p")
        assert coordinate.slug == "g/sub/p"

    def test_platform_values(self):
        assert Platform.GITLAB_COMPATIBLE == "gitlab-compatible"
        assert Platform("sourceforge") is Platform.SOURCEFORGE


class TestVersionProbe:
    def test_empty_probe(self):
        probe = VersionProbe()
        assert probe.latest_tag is None
        assert probe.has_commit is False

    def test_commit_probe(self):
        when = datetime(2024, 1, 1, tzinfo=timezone.utc)
        info = CommitInfo(commit_id="abc", committed_at=when)
        probe = VersionProbe(latest_commit_id=info.commit_id, latest_commit_date=info.committed_at)
        assert probe.has_commit is True


class TestAuditResult:
    def test_empty_matrix(self):
        assert AuditResult().to_matrix() == {}

    def test_matrix_uses_camel_case(self):
        result = AuditResult(issues=[
            TagIssue(engine_name="foo", new_tag="v1.1.0", old_tag="v1.0.0"),
            HashIssue(engine_name="bar", new_hash="bbbbbbb", old_hash="aaaaaaa"),
        ])
        assert result.to_matrix() == {
            "include": [
                {"engineName": "foo", "newTag": "v1.1.0", "oldTag": "v1.0.0"},
                {"engineName": "bar", "newHash": "bbbbbbb", "oldHash": "aaaaaaa"},
            ]
        }

    def test_issue_immutable(self):
        issue = TagIssue(engine_name="foo", new_tag="v2", old_tag="v1")
        with pytest.raises(ValidationError):
            issue.new_tag = "v3"
