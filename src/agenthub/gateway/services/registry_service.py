"""RegistryService -- 传输层与核心之间的编排

职责：
1. 变更前的权限判定（namespace 归属、owner 检查），先于任何写入
2. 发布前的 agent spec 信封校验（可配置关闭）
3. pull 时的下载计数
其余语义全部委托给核心 store。
"""

import structlog
from agenthub.core.access import require_owner
from agenthub.core.errors import ForbiddenError, NotFoundError, PayloadTooLargeError
from agenthub.core.models import (
    Artifact,
    ArtifactFilter,
    ArtifactMetadata,
    ArtifactPage,
    ArtifactPatch,
    Principal,
    SortKey,
    Version,
    parse_agent_spec,
)
from agenthub.core.reference import Reference, validate_identity_segment
from agenthub.core.store import StoreGroup

log = structlog.get_logger()


class RegistryService:
    """Registry 业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group
        self._config = store_group.config

    # ===== Agent =====

    async def create_agent(
        self,
        principal: Principal,
        name: str,
        metadata: ArtifactMetadata,
        namespace: str | None = None,
    ) -> Artifact:
        """在调用方自己的命名空间下创建 agent

        Raises:
            ForbiddenError: 目标命名空间不属于调用方
        """
        target = namespace or principal.name
        if not target:
            raise ForbiddenError("caller has no namespace to publish into")
        validate_identity_segment(target, "namespace")
        if target != principal.name:
            raise ForbiddenError(f"permission denied on namespace {target}")

        return await self._stores.catalog.create_artifact(
            target,
            name,
            metadata,
            owner_id=principal.principal_id,
        )

    async def get_agent(
        self,
        namespace: str,
        name: str,
        principal: Principal,
    ) -> tuple[Artifact, Version | None]:
        """查询 agent 详情及其 latest 版本（零版本时为 None）"""
        artifact = await self._stores.catalog.get_artifact(
            namespace, name, caller_id=principal.principal_id
        )
        try:
            latest = await self._stores.ledger.get_latest_version(artifact.artifact_id)
        except NotFoundError:
            latest = None
        return artifact, latest

    async def update_agent(
        self,
        namespace: str,
        name: str,
        patch: ArtifactPatch,
        principal: Principal,
    ) -> Artifact:
        artifact = await self._get_owned(namespace, name, principal)
        return await self._stores.catalog.update_artifact(artifact.artifact_id, patch)

    async def delete_agent(self, namespace: str, name: str, principal: Principal) -> int:
        """删除 agent 及全部版本，返回被删除的版本数"""
        artifact = await self._get_owned(namespace, name, principal)
        return await self._stores.catalog.delete_artifact(artifact.artifact_id)

    async def list_agents(
        self,
        filter: ArtifactFilter,
        sort: SortKey = SortKey.UPDATED,
        page: int = 1,
        page_size: int | None = None,
    ) -> ArtifactPage:
        return await self._stores.query.list_artifacts(
            filter,
            sort=sort,
            page=page,
            page_size=page_size or self._config.default_page_size,
        )

    async def count_categories(self) -> dict[str, int]:
        return await self._stores.query.count_by_category()

    # ===== Version =====

    async def list_versions(
        self,
        namespace: str,
        name: str,
        principal: Principal,
    ) -> list[Version]:
        artifact = await self._stores.catalog.get_artifact(
            namespace, name, caller_id=principal.principal_id
        )
        return await self._stores.ledger.list_versions(artifact.artifact_id)

    async def publish_version(
        self,
        namespace: str,
        name: str,
        version: str,
        spec: str,
        changelog: str,
        principal: Principal,
    ) -> Version:
        """发布新版本

        顺序：可见性 -> owner -> 大小 -> spec 信封 -> 账本原子发布。
        """
        artifact = await self._get_owned(namespace, name, principal)

        payload = spec.encode("utf-8")
        if len(payload) > self._config.max_payload_bytes:
            raise PayloadTooLargeError(len(payload), self._config.max_payload_bytes)
        if self._config.validate_spec:
            parse_agent_spec(payload)

        return await self._stores.ledger.publish_version(
            artifact.artifact_id,
            version,
            payload,
            changelog,
            publisher_id=principal.principal_id,
        )

    async def pull_version(
        self,
        namespace: str,
        name: str,
        selector: str,
        principal: Principal,
    ) -> tuple[Artifact, Version, bytes]:
        """拉取版本：解析 selector、读取内容并递增 artifact 与版本的下载计数"""
        artifact, version = await self.resolve_version(namespace, name, selector, principal)
        content = await self._stores.ledger.get_version_content(version)

        artifact_downloads = await self._stores.catalog.increment_downloads(artifact.artifact_id)
        version_downloads = await self._stores.ledger.increment_version_downloads(
            version.version_id
        )
        log.info(
            "version_pulled",
            artifact_id=artifact.artifact_id,
            version=version.version,
            downloads=artifact_downloads,
        )
        return (
            artifact.model_copy(update={"downloads": artifact_downloads}),
            version.model_copy(update={"downloads": version_downloads}),
            content,
        )

    async def get_version_content(
        self,
        namespace: str,
        name: str,
        selector: str,
        principal: Principal,
    ) -> tuple[Version, bytes]:
        """读取版本原始内容（不计下载）"""
        _, version = await self.resolve_version(namespace, name, selector, principal)
        content = await self._stores.ledger.get_version_content(version)
        return version, content

    async def resolve_version(
        self,
        namespace: str,
        name: str,
        selector: str,
        principal: Principal,
    ) -> tuple[Artifact, Version]:
        reference = Reference(namespace=namespace, name=name, selector=selector)
        return await self._stores.resolver.resolve_reference(
            reference, caller_id=principal.principal_id
        )

    async def resolve(self, ref: str, principal: Principal) -> tuple[Artifact, Version]:
        return await self._stores.resolver.resolve(ref, caller_id=principal.principal_id)

    # ===== Likes =====

    async def like(self, namespace: str, name: str, principal: Principal) -> int:
        artifact = await self._stores.catalog.get_artifact(
            namespace, name, caller_id=principal.principal_id
        )
        return await self._stores.catalog.increment_likes(artifact.artifact_id)

    async def unlike(self, namespace: str, name: str, principal: Principal) -> int:
        artifact = await self._stores.catalog.get_artifact(
            namespace, name, caller_id=principal.principal_id
        )
        return await self._stores.catalog.decrement_likes(artifact.artifact_id)

    async def _get_owned(self, namespace: str, name: str, principal: Principal) -> Artifact:
        """查询并要求调用方为 owner（不可见时为 NotFound，可见非 owner 为 Forbidden）"""
        artifact = await self._stores.catalog.get_artifact(
            namespace, name, caller_id=principal.principal_id
        )
        require_owner(artifact, principal)
        return artifact
