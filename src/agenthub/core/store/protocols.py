"""Store Protocol 接口定义

定义 ArtifactCatalog、VersionLedger、BlobStore、CatalogQuery 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Protocol

from ..models import (
    Artifact,
    ArtifactFilter,
    ArtifactMetadata,
    ArtifactPage,
    ArtifactPatch,
    SortKey,
    Version,
)


class ArtifactCatalog(Protocol):
    """Artifact 目录接口：身份、元数据与计数器"""

    async def create_artifact(
        self,
        namespace: str,
        name: str,
        metadata: ArtifactMetadata,
        owner_id: str,
    ) -> Artifact:
        """创建 Artifact，(namespace, name) 重复时抛出 ConflictError"""
        ...

    async def get_artifact(
        self,
        namespace: str,
        name: str,
        caller_id: str | None = None,
    ) -> Artifact:
        """查询对调用方可见的 Artifact"""
        ...

    async def get_artifact_by_id(self, artifact_id: str) -> Artifact:
        ...

    async def update_artifact(self, artifact_id: str, patch: ArtifactPatch) -> Artifact:
        """部分更新元数据"""
        ...

    async def delete_artifact(self, artifact_id: str) -> int:
        """删除 Artifact 及全部版本"""
        ...

    async def increment_downloads(self, artifact_id: str) -> int:
        ...

    async def increment_likes(self, artifact_id: str) -> int:
        ...

    async def decrement_likes(self, artifact_id: str) -> int:
        ...


class VersionLedger(Protocol):
    """版本账本接口：发布与 latest 指针"""

    async def publish_version(
        self,
        artifact_id: str,
        version: str,
        payload: bytes,
        changelog: str,
        publisher_id: str,
    ) -> Version:
        """发布新版本并原子地设为 latest"""
        ...

    async def get_version(self, artifact_id: str, version: str) -> Version:
        ...

    async def get_latest_version(self, artifact_id: str) -> Version:
        ...

    async def list_versions(self, artifact_id: str) -> list[Version]:
        """按发布时间倒序列出全部版本"""
        ...

    async def get_version_content(self, version: Version) -> bytes:
        ...


class BlobStore(Protocol):
    """以 digest 寻址的内容存储"""

    async def exists(self, digest: str) -> bool:
        ...

    async def put(self, digest: str, content: bytes) -> bool:
        """写入 blob，已存在时跳过"""
        ...

    async def get(self, digest: str) -> bytes | None:
        ...


class CatalogQuery(Protocol):
    """目录查询接口"""

    async def list_artifacts(
        self,
        filter: ArtifactFilter,
        sort: SortKey = SortKey.UPDATED,
        page: int = 1,
        page_size: int = 20,
    ) -> ArtifactPage:
        """过滤、排序、分页"""
        ...

    async def count_by_category(self) -> dict[str, int]:
        ...
