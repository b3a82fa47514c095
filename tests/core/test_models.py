"""Domain Model 单元测试

测试内容：
1. 枚举取值
2. Artifact / ArtifactMetadata / ArtifactPatch 校验与规范化
3. ArtifactPage 分页计算
4. Agent spec 信封解析（带标签的运行时变体）
"""

from datetime import UTC, datetime

import pytest
from agenthub.core.errors import InvalidArgumentError
from agenthub.core.models import (
    ANONYMOUS,
    Artifact,
    ArtifactMetadata,
    ArtifactPage,
    ArtifactPatch,
    Principal,
    RuntimeType,
    SortKey,
    Version,
    Visibility,
    parse_agent_spec,
)
from agenthub.core.models.agent_spec import PromptRuntime, RemoteRuntime
from pydantic import ValidationError

PROMPT_SPEC = b"""
version: "1"
metadata:
  name: bot
  description: a helpful bot
  tags: [chat]
runtime:
  type: prompt
  entry: prompts/system.md
model:
  provider: openai
"""


class TestEnums:
    def test_visibility_values(self):
        assert {v.value for v in Visibility} == {"public", "private", "unlisted"}

    def test_sort_keys(self):
        assert SortKey("downloads") == SortKey.DOWNLOADS
        assert [s.value for s in SortKey] == ["updated", "downloads", "likes", "name"]

    def test_runtime_types(self):
        assert len(RuntimeType) == 5


class TestArtifactModels:
    def test_metadata_defaults(self):
        """未提供字段使用默认值"""
        metadata = ArtifactMetadata()
        assert metadata.category == "other"
        assert metadata.visibility == Visibility.PUBLIC
        assert metadata.tags == []

    def test_tags_deduplicated_in_order(self):
        """tags 去重并保留首次出现顺序"""
        metadata = ArtifactMetadata(tags=["b", "a", "b", " a ", ""])
        assert metadata.tags == ["b", "a"]

    def test_patch_changes_only_set_fields(self):
        """patch 只包含显式设置的字段"""
        patch = ArtifactPatch(description="new", tags=["x", "x"])
        assert patch.changes() == {"description": "new", "tags": ["x"]}

    def test_patch_ignores_explicit_none(self):
        patch = ArtifactPatch(description=None, license="MIT")
        assert patch.changes() == {"license": "MIT"}

    def test_full_name(self):
        now = datetime.now(UTC)
        artifact = Artifact(
            artifact_id="01JTESTARTIFACT00000000001",
            namespace="alice",
            name="bot",
            owner_id="u-alice",
            created_at=now,
            updated_at=now,
        )
        assert artifact.full_name == "alice/bot"
        assert artifact.downloads == 0
        assert artifact.likes == 0

    def test_negative_counter_rejected(self):
        now = datetime.now(UTC)
        with pytest.raises(ValidationError):
            Artifact(
                artifact_id="01JTESTARTIFACT00000000001",
                namespace="alice",
                name="bot",
                owner_id="u-alice",
                downloads=-1,
                created_at=now,
                updated_at=now,
            )

    def test_version_stored_inline(self):
        now = datetime.now(UTC)
        version = Version(
            version_id="01JTESTVERSION000000000001",
            artifact_id="01JTESTARTIFACT00000000001",
            version="1.0.0",
            digest="sha256:" + "0" * 64,
            size=1,
            payload=b"A",
            published_at=now,
            published_by="u-alice",
        )
        assert version.stored_inline is True
        assert "payload" not in repr(version)
        assert version.model_copy(update={"payload": None}).stored_inline is False


class TestArtifactPage:
    @pytest.mark.parametrize(
        ("total", "page_size", "pages"),
        [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (5, 2, 3)],
    )
    def test_pages(self, total, page_size, pages):
        page = ArtifactPage(items=[], total=total, page=1, page_size=page_size)
        assert page.pages == pages


class TestPrincipal:
    def test_anonymous(self):
        assert ANONYMOUS.is_authenticated is False

    def test_authenticated(self):
        assert Principal(principal_id="u-1", name="alice").is_authenticated is True


class TestAgentSpec:
    def test_parse_prompt_runtime(self):
        """prompt 运行时解析为对应变体，未知段落原样保留"""
        spec = parse_agent_spec(PROMPT_SPEC)
        assert isinstance(spec.runtime, PromptRuntime)
        assert spec.metadata.name == "bot"
        assert spec.model_extra["model"] == {"provider": "openai"}

    def test_parse_remote_runtime(self):
        spec = parse_agent_spec(
            b"metadata: {name: r}\nruntime: {type: remote, remote: {endpoint: 'https://x'}}\n"
        )
        assert isinstance(spec.runtime, RemoteRuntime)
        assert spec.runtime.remote.endpoint == "https://x"

    def test_unknown_runtime_type_rejected(self):
        with pytest.raises(InvalidArgumentError, match="invalid agent spec"):
            parse_agent_spec(b"metadata: {name: x}\nruntime: {type: wasm}\n")

    def test_missing_runtime_rejected(self):
        with pytest.raises(InvalidArgumentError):
            parse_agent_spec(b"metadata: {name: x}\n")

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidArgumentError, match="mapping"):
            parse_agent_spec(b"- just\n- a list\n")

    def test_malformed_yaml_rejected(self):
        with pytest.raises(InvalidArgumentError):
            parse_agent_spec(b"metadata: [unclosed\n")

    def test_non_utf8_rejected(self):
        with pytest.raises(InvalidArgumentError):
            parse_agent_spec(b"\xff\xfe\x00")
