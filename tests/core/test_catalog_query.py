"""CatalogQuery 单元测试

测试内容：
1. 分类 + 下载量排序 + 分页（total 为分页前总数）
2. 可见性过滤：非 mine 只含 public；mine 含自己的全部
3. 大小写不敏感搜索（含非 ASCII）
4. 翻页确定性：并列排序键按 artifact_id 升序
5. 参数校验
"""

import pytest
import pytest_asyncio
from agenthub.core.errors import InvalidArgumentError
from agenthub.core.models import ArtifactFilter, ArtifactMetadata, SortKey, Visibility


async def create(store_group, namespace, name, owner_id=None, downloads=0, likes=0, **metadata):
    artifact = await store_group.catalog.create_artifact(
        namespace, name, ArtifactMetadata(**metadata), owner_id or f"u-{namespace}"
    )
    for _ in range(downloads):
        await store_group.catalog.increment_downloads(artifact.artifact_id)
    for _ in range(likes):
        await store_group.catalog.increment_likes(artifact.artifact_id)
    return artifact


@pytest_asyncio.fixture
async def coding_catalog(store_group):
    """5 个 public coding + 2 个其他分类 + private/unlisted 各 1 个"""
    for i, downloads in enumerate([3, 7, 1, 5, 0]):
        await create(store_group, "alice", f"coder-{i}", downloads=downloads, category="coding")
    await create(store_group, "bob", "writer", category="writing", description="Writes Prose")
    await create(store_group, "bob", "analyst", category="analysis", description="Ünïcode ANALYSIS")
    await create(
        store_group, "alice", "secret", category="coding", visibility=Visibility.PRIVATE
    )
    await create(
        store_group, "alice", "quiet", category="coding", visibility=Visibility.UNLISTED
    )
    return store_group


class TestListArtifacts:
    async def test_category_sorted_by_downloads_paginated(self, coding_catalog):
        """coding 分类按下载量倒序，每页 2 条，第 1 页为下载量最高的两个，total=5"""
        result = await coding_catalog.query.list_artifacts(
            ArtifactFilter(category="coding"),
            sort=SortKey.DOWNLOADS,
            page=1,
            page_size=2,
        )
        assert result.total == 5
        assert result.pages == 3
        assert [a.name for a in result.items] == ["coder-1", "coder-3"]
        assert [a.downloads for a in result.items] == [7, 5]

    async def test_pages_partition_results(self, coding_catalog):
        """逐页拼接等于一次性查询，无重复无遗漏"""
        query = coding_catalog.query
        full = await query.list_artifacts(ArtifactFilter(), sort=SortKey.DOWNLOADS, page_size=100)
        paged = []
        for page in range(1, 5):
            result = await query.list_artifacts(
                ArtifactFilter(), sort=SortKey.DOWNLOADS, page=page, page_size=2
            )
            assert result.total == full.total
            paged.extend(a.artifact_id for a in result.items)
        assert paged == [a.artifact_id for a in full.items]

    async def test_ties_broken_by_artifact_id(self, coding_catalog):
        """likes 全为 0 时按 artifact_id 升序"""
        result = await coding_catalog.query.list_artifacts(
            ArtifactFilter(), sort=SortKey.LIKES, page_size=100
        )
        ids = [a.artifact_id for a in result.items]
        assert ids == sorted(ids)

    async def test_sort_by_name(self, coding_catalog):
        result = await coding_catalog.query.list_artifacts(
            ArtifactFilter(owner="bob"), sort=SortKey.NAME
        )
        assert [a.name for a in result.items] == ["analyst", "writer"]

    async def test_default_sort_recently_updated_first(self, store_group):
        await create(store_group, "alice", "old")
        await create(store_group, "alice", "new")
        result = await store_group.query.list_artifacts(ArtifactFilter())
        assert [a.name for a in result.items] == ["new", "old"]

    async def test_publish_moves_artifact_to_front(self, store_group):
        old = await create(store_group, "alice", "old")
        await create(store_group, "alice", "new")
        await store_group.ledger.publish_version(old.artifact_id, "1.0.0", b"A", "", "u-alice")
        result = await store_group.query.list_artifacts(ArtifactFilter())
        assert result.items[0].name == "old"

    async def test_only_public_listed(self, coding_catalog):
        result = await coding_catalog.query.list_artifacts(ArtifactFilter(), page_size=100)
        assert result.total == 7
        assert {a.visibility for a in result.items} == {Visibility.PUBLIC}

    async def test_mine_includes_all_visibilities(self, coding_catalog):
        result = await coding_catalog.query.list_artifacts(
            ArtifactFilter(mine=True, caller_id="u-alice"), page_size=100
        )
        assert result.total == 7
        assert {a.name for a in result.items} >= {"secret", "quiet"}

    async def test_mine_requires_caller(self, coding_catalog):
        with pytest.raises(InvalidArgumentError):
            await coding_catalog.query.list_artifacts(ArtifactFilter(mine=True))

    async def test_owner_filter(self, coding_catalog):
        result = await coding_catalog.query.list_artifacts(ArtifactFilter(owner="bob"))
        assert result.total == 2

    async def test_page_past_end(self, coding_catalog):
        """越过末页：空列表，total 仍为匹配总数"""
        result = await coding_catalog.query.list_artifacts(
            ArtifactFilter(category="coding"), page=10, page_size=2
        )
        assert result.items == []
        assert result.total == 5

    async def test_empty_catalog(self, store_group):
        result = await store_group.query.list_artifacts(ArtifactFilter())
        assert result.items == []
        assert result.total == 0


class TestSearch:
    @pytest.mark.parametrize(
        ("search", "expected"),
        [
            ("CODER-1", {"coder-1"}),
            ("prose", {"writer"}),
            ("ünïcode", {"analyst"}),
            ("analysis", {"analyst"}),
            ("nomatch", set()),
        ],
    )
    async def test_case_insensitive_substring(self, coding_catalog, search, expected):
        result = await coding_catalog.query.list_artifacts(
            ArtifactFilter(search=search), page_size=100
        )
        assert {a.name for a in result.items} == expected

    async def test_search_excludes_non_public(self, coding_catalog):
        result = await coding_catalog.query.list_artifacts(ArtifactFilter(search="secret"))
        assert result.total == 0

    async def test_search_combined_with_category(self, coding_catalog):
        result = await coding_catalog.query.list_artifacts(
            ArtifactFilter(search="coder", category="writing")
        )
        assert result.total == 0

    async def test_blank_search_matches_all(self, coding_catalog):
        result = await coding_catalog.query.list_artifacts(ArtifactFilter(search="   "))
        assert result.total == 7

    async def test_like_wildcards_are_literal(self, coding_catalog):
        result = await coding_catalog.query.list_artifacts(ArtifactFilter(search="%"))
        assert result.total == 0


class TestValidation:
    @pytest.mark.parametrize(("page", "page_size"), [(0, 20), (-1, 20), (1, 0), (1, 101)])
    async def test_bad_pagination(self, store_group, page, page_size):
        with pytest.raises(InvalidArgumentError):
            await store_group.query.list_artifacts(ArtifactFilter(), page=page, page_size=page_size)

    async def test_unknown_category(self, store_group):
        with pytest.raises(InvalidArgumentError, match="category"):
            await store_group.query.list_artifacts(ArtifactFilter(category="weapons"))


class TestCategoryCounts:
    async def test_counts_public_only(self, coding_catalog):
        counts = await coding_catalog.query.count_by_category()
        assert counts["coding"] == 5
        assert counts["writing"] == 1
        assert counts["analysis"] == 1
        assert counts["research"] == 0
        assert len(counts) == 10
