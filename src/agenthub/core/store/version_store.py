"""VersionLedger SQLite 实现 -- latest 指针的原子切换

发布流程：
1. 校验版本号非空
2. 计算 digest/size（超限报错，不截断）
3. 大 payload 先按 digest 写入 blob store（幂等，已存在则跳过）
4. 单个写事务内：清除旧 latest -> 插入新版本 (is_latest=1) -> 刷新 artifact.updated_at

(artifact_id, version) 唯一约束与 is_latest 部分唯一索引由数据库保证，
并发发布同一版本号时只有一个成功，另一个得到 ConflictError。
并发发布不同版本号时最后提交者成为 latest。
"""

from dataclasses import dataclass

import aiosqlite
import structlog
from ulid import ULID

from ..config import LATEST_SELECTOR
from ..digest import compute_digest_and_size, verify_digest
from ..errors import ConflictError, InvalidArgumentError, NotFoundError
from ..models import Version, VersionStatus
from ._codec import format_ts, row_to_version, utc_now
from .protocols import BlobStore
from .transaction import is_unique_violation, write_transaction

log = structlog.get_logger()


@dataclass(frozen=True)
class InvariantViolation:
    """latest 指针不变量违例"""

    artifact_id: str
    version_count: int
    latest_count: int

    def describe(self) -> str:
        if self.latest_count > 1:
            return f"{self.artifact_id}: {self.latest_count} versions marked latest"
        return f"{self.artifact_id}: {self.version_count} versions but no latest"


class SqliteVersionLedger:
    """VersionLedger 的 SQLite + BlobStore 实现"""

    def __init__(
        self,
        conn: aiosqlite.Connection,
        db_path: str,
        blob_store: BlobStore,
        inline_threshold: int,
        max_payload_bytes: int,
    ) -> None:
        self._conn = conn
        self._db_path = db_path
        self._blob_store = blob_store
        self._inline_threshold = inline_threshold
        self._max_payload_bytes = max_payload_bytes

    async def publish_version(
        self,
        artifact_id: str,
        version: str,
        payload: bytes,
        changelog: str,
        publisher_id: str,
    ) -> Version:
        """发布新版本并原子地将其设为 latest

        Raises:
            InvalidArgumentError: 版本号为空，或为保留的 latest 选择器
            PayloadTooLargeError: payload 超过上限
            NotFoundError: artifact 不存在
            ConflictError: 版本号已存在
        """
        if not version:
            raise InvalidArgumentError("version must not be empty")
        if version == LATEST_SELECTOR:
            raise InvalidArgumentError(f"version {version!r} is reserved for the latest selector")

        digest, size = compute_digest_and_size(payload, self._max_payload_bytes)

        inline = size < self._inline_threshold
        if not inline:
            await self._blob_store.put(digest, payload)

        version_id = str(ULID())
        try:
            async with write_transaction(self._db_path) as conn:
                cursor = await conn.execute(
                    "SELECT 1 FROM artifacts WHERE artifact_id = ?",
                    (artifact_id,),
                )
                if await cursor.fetchone() is None:
                    raise NotFoundError(f"agent {artifact_id} not found", missing="artifact")

                # 在写锁内取时间，发布时间顺序与提交顺序一致
                published_at = utc_now()

                await conn.execute(
                    "UPDATE versions SET is_latest = 0 WHERE artifact_id = ? AND is_latest = 1",
                    (artifact_id,),
                )
                await conn.execute(
                    """
                    INSERT INTO versions (version_id, artifact_id, version, digest, size,
                                          payload, changelog, is_latest, status,
                                          published_at, published_by)
                    VALUES (?, ?, ?, ?, ?, ?, ?, 1, ?, ?, ?)
                    """,
                    (
                        version_id,
                        artifact_id,
                        version,
                        digest,
                        size,
                        payload if inline else None,
                        changelog,
                        VersionStatus.ACTIVE.value,
                        format_ts(published_at),
                        publisher_id,
                    ),
                )
                await conn.execute(
                    "UPDATE artifacts SET updated_at = ? WHERE artifact_id = ?",
                    (format_ts(published_at), artifact_id),
                )
        except aiosqlite.IntegrityError as e:
            if is_unique_violation(e):
                raise ConflictError(f"version {version} already exists") from e
            raise

        log.info(
            "version_published",
            artifact_id=artifact_id,
            version=version,
            digest=digest,
            size=size,
            inline=inline,
        )
        # 由刚写入的值构造，不在提交后回读
        return Version(
            version_id=version_id,
            artifact_id=artifact_id,
            version=version,
            digest=digest,
            size=size,
            payload=payload if inline else None,
            changelog=changelog,
            is_latest=True,
            status=VersionStatus.ACTIVE,
            published_at=published_at,
            published_by=publisher_id,
        )

    async def get_version(self, artifact_id: str, version: str) -> Version:
        """按版本号精确查询

        Raises:
            NotFoundError: missing="version"
        """
        cursor = await self._conn.execute(
            "SELECT * FROM versions WHERE artifact_id = ? AND version = ?",
            (artifact_id, version),
        )
        row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(f"version {version} not found", missing="version")
        return row_to_version(row)

    async def get_latest_version(self, artifact_id: str) -> Version:
        """查询 latest 版本，从不回退到任意版本

        Raises:
            NotFoundError: missing="latest"
        """
        cursor = await self._conn.execute(
            "SELECT * FROM versions WHERE artifact_id = ? AND is_latest = 1",
            (artifact_id,),
        )
        rows = await cursor.fetchall()
        if not rows:
            raise NotFoundError("no version has been published", missing="latest")
        if len(rows) > 1:
            # 部分唯一索引下不可达；出现即说明存储被绕过写入
            log.error("latest_invariant_violated", artifact_id=artifact_id, count=len(rows))
        return row_to_version(rows[0])

    async def list_versions(self, artifact_id: str) -> list[Version]:
        """列出全部版本，按发布时间倒序（同一时间按插入顺序倒序）"""
        cursor = await self._conn.execute(
            """
            SELECT * FROM versions WHERE artifact_id = ?
            ORDER BY published_at DESC, rowid DESC
            """,
            (artifact_id,),
        )
        rows = await cursor.fetchall()
        return [row_to_version(row) for row in rows]

    async def get_version_content(self, version: Version) -> bytes:
        """获取版本内容

        - inline 内容：直接返回
        - blob 内容：按 digest 从 blob store 读取

        Raises:
            NotFoundError: blob 缺失
            IntegrityError: 内容与 digest 不一致
        """
        if version.payload is not None:
            content = version.payload
        else:
            content = await self._blob_store.get(version.digest)
            if content is None:
                raise NotFoundError(
                    f"content {version.digest} of version {version.version} is missing",
                    missing="content",
                )
        verify_digest(content, version.digest)
        return content

    async def increment_version_downloads(self, version_id: str) -> int:
        """版本下载计数原子 +1，返回新值"""
        async with write_transaction(self._db_path) as conn:
            cursor = await conn.execute(
                """
                UPDATE versions SET downloads = downloads + 1
                WHERE version_id = ?
                RETURNING downloads
                """,
                (version_id,),
            )
            rows = await cursor.fetchall()
            if not rows:
                raise NotFoundError(f"version {version_id} not found", missing="version")
        return rows[0][0]

    async def check_invariants(self) -> list[InvariantViolation]:
        """扫描 latest 指针不变量：有版本的 artifact 恰好一个 latest"""
        cursor = await self._conn.execute(
            """
            SELECT artifact_id, COUNT(*) AS version_count,
                   SUM(CASE WHEN is_latest = 1 THEN 1 ELSE 0 END) AS latest_count
            FROM versions
            GROUP BY artifact_id
            HAVING latest_count <> 1
            ORDER BY artifact_id
            """
        )
        rows = await cursor.fetchall()
        return [
            InvariantViolation(
                artifact_id=row["artifact_id"],
                version_count=row["version_count"],
                latest_count=row["latest_count"],
            )
            for row in rows
        ]
