"""ArtifactCatalog SQLite 实现

(namespace, name) 唯一性由 UNIQUE 约束保证，冲突统一转换为 ConflictError。
读操作走共享连接；写操作各自在 write_transaction 中完成。
计数器只通过单条 UPDATE 原子自增，从不在应用层读-改-写。
"""

import json

import aiosqlite
import structlog
from ulid import ULID

from ..access import is_visible
from ..errors import ConflictError, NotFoundError
from ..models import Artifact, ArtifactMetadata, ArtifactPatch
from ..reference import validate_identity_segment
from ._codec import format_ts, row_to_artifact, utc_now
from .transaction import is_unique_violation, write_transaction

log = structlog.get_logger()


class SqliteArtifactCatalog:
    """ArtifactCatalog 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection, db_path: str) -> None:
        self._conn = conn
        self._db_path = db_path

    async def create_artifact(
        self,
        namespace: str,
        name: str,
        metadata: ArtifactMetadata,
        owner_id: str,
    ) -> Artifact:
        """创建 Artifact

        Raises:
            InvalidArgumentError: namespace/name 不可寻址
            ConflictError: (namespace, name) 已存在
        """
        validate_identity_segment(namespace, "namespace")
        validate_identity_segment(name, "name")

        now = utc_now()
        artifact = Artifact(
            artifact_id=str(ULID()),
            namespace=namespace,
            name=name,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            **metadata.model_dump(),
        )

        try:
            async with write_transaction(self._db_path) as conn:
                await conn.execute(
                    """
                    INSERT INTO artifacts (artifact_id, namespace, name, description,
                                           category, tags, visibility, license, homepage,
                                           repository, owner_id, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        artifact.artifact_id,
                        artifact.namespace,
                        artifact.name,
                        artifact.description,
                        artifact.category,
                        json.dumps(artifact.tags, ensure_ascii=False),
                        artifact.visibility.value,
                        artifact.license,
                        artifact.homepage,
                        artifact.repository,
                        artifact.owner_id,
                        format_ts(artifact.created_at),
                        format_ts(artifact.updated_at),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            if is_unique_violation(e):
                raise ConflictError(f"agent {artifact.full_name} already exists") from e
            raise

        log.info(
            "artifact_created",
            artifact_id=artifact.artifact_id,
            full_name=artifact.full_name,
            owner_id=owner_id,
        )
        return artifact

    async def get_artifact(
        self,
        namespace: str,
        name: str,
        caller_id: str | None = None,
    ) -> Artifact:
        """根据 (namespace, name) 查询 Artifact

        对调用方不可见的 private artifact 与不存在的 artifact 表现一致。

        Raises:
            NotFoundError: missing="artifact"
        """
        cursor = await self._conn.execute(
            "SELECT * FROM artifacts WHERE namespace = ? AND name = ?",
            (namespace, name),
        )
        row = await cursor.fetchone()
        if row is None or not is_visible(row["visibility"], caller_id, row["owner_id"]):
            raise NotFoundError(
                f"agent {namespace}/{name} not found",
                missing="artifact",
                reference=f"{namespace}/{name}",
            )
        return row_to_artifact(row)

    async def get_artifact_by_id(self, artifact_id: str) -> Artifact:
        """根据 artifact_id 查询（内部使用，不做可见性判定）"""
        cursor = await self._conn.execute(
            "SELECT * FROM artifacts WHERE artifact_id = ?",
            (artifact_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(f"agent {artifact_id} not found", missing="artifact")
        return row_to_artifact(row)

    async def update_artifact(self, artifact_id: str, patch: ArtifactPatch) -> Artifact:
        """部分更新元数据，始终刷新 updated_at"""
        changes = patch.changes()
        if "tags" in changes:
            changes["tags"] = json.dumps(changes["tags"], ensure_ascii=False)
        if "visibility" in changes:
            changes["visibility"] = changes["visibility"].value
        changes["updated_at"] = format_ts(utc_now())

        # 列名来自 ArtifactPatch 字段白名单
        assignments = ", ".join(f"{column} = ?" for column in changes)
        async with write_transaction(self._db_path) as conn:
            cursor = await conn.execute(
                f"UPDATE artifacts SET {assignments} WHERE artifact_id = ? RETURNING *",
                (*changes.values(), artifact_id),
            )
            rows = await cursor.fetchall()
            if not rows:
                raise NotFoundError(f"agent {artifact_id} not found", missing="artifact")

        artifact = row_to_artifact(rows[0])
        log.info(
            "artifact_updated",
            artifact_id=artifact_id,
            fields=sorted(k for k in changes if k != "updated_at"),
        )
        return artifact

    async def delete_artifact(self, artifact_id: str) -> int:
        """删除 Artifact 及其全部版本（同一事务内，先版本后 artifact）

        Returns:
            被删除的版本数
        """
        async with write_transaction(self._db_path) as conn:
            cursor = await conn.execute(
                "DELETE FROM versions WHERE artifact_id = ?",
                (artifact_id,),
            )
            deleted_versions = cursor.rowcount
            cursor = await conn.execute(
                "DELETE FROM artifacts WHERE artifact_id = ?",
                (artifact_id,),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"agent {artifact_id} not found", missing="artifact")

        log.info(
            "artifact_deleted",
            artifact_id=artifact_id,
            deleted_versions=deleted_versions,
        )
        return deleted_versions

    async def increment_downloads(self, artifact_id: str) -> int:
        """下载计数原子 +1，返回新值"""
        return await self._add_to_counter(artifact_id, "downloads", 1)

    async def increment_likes(self, artifact_id: str) -> int:
        """点赞计数原子 +1，返回新值"""
        return await self._add_to_counter(artifact_id, "likes", 1)

    async def decrement_likes(self, artifact_id: str) -> int:
        """点赞计数原子 -1（不低于 0），返回新值"""
        return await self._add_to_counter(artifact_id, "likes", -1)

    async def _add_to_counter(self, artifact_id: str, column: str, delta: int) -> int:
        async with write_transaction(self._db_path) as conn:
            cursor = await conn.execute(
                f"""
                UPDATE artifacts SET {column} = MAX({column} + ?, 0)
                WHERE artifact_id = ?
                RETURNING {column}
                """,
                (delta, artifact_id),
            )
            rows = await cursor.fetchall()
            if not rows:
                raise NotFoundError(f"agent {artifact_id} not found", missing="artifact")
        return rows[0][0]
