"""AgentHub Core Store -- SQLite 持久化实现

提供工厂函数创建共享读连接的 Store 实例组。
写操作不使用共享连接，而是各自通过 write_transaction 打开独立连接。
"""

from pathlib import Path

import aiosqlite

from ..config import DEFAULT_NAMESPACE, RegistryConfig
from .artifact_store import SqliteArtifactCatalog
from .blob_store import FilesystemBlobStore
from .query import SqliteCatalogQuery, register_sql_functions
from .sqlite_init import init_db
from .transaction import write_transaction
from .version_store import InvariantViolation, SqliteVersionLedger


class StoreGroup:
    """Store 实例组 -- 共享同一个读连接"""

    def __init__(
        self,
        conn: aiosqlite.Connection,
        db_path: str,
        blobs_dir: Path,
        config: RegistryConfig,
        default_namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        from ..resolver import ReferenceResolver

        self.conn = conn
        self.db_path = db_path
        self.config = config
        self.blob_store = FilesystemBlobStore(blobs_dir)
        self.catalog = SqliteArtifactCatalog(conn, db_path)
        self.ledger = SqliteVersionLedger(
            conn,
            db_path,
            self.blob_store,
            inline_threshold=config.inline_threshold,
            max_payload_bytes=config.max_payload_bytes,
        )
        self.query = SqliteCatalogQuery(conn, max_page_size=config.max_page_size)
        self.resolver = ReferenceResolver(
            self.catalog,
            self.ledger,
            default_namespace=default_namespace,
        )

    async def close(self) -> None:
        await self.conn.close()


async def create_store_group(
    db_path: str,
    blobs_dir: str | Path,
    config: RegistryConfig | None = None,
) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径
        blobs_dir: blob 内容存储目录
        config: Registry 配置，缺省使用默认值

    Returns:
        StoreGroup 实例
    """
    blobs_path = Path(blobs_dir)
    blobs_path.mkdir(parents=True, exist_ok=True)

    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)
    await register_sql_functions(conn)

    return StoreGroup(
        conn=conn,
        db_path=db_path,
        blobs_dir=blobs_path,
        config=config or RegistryConfig(),
    )


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteArtifactCatalog",
    "SqliteVersionLedger",
    "SqliteCatalogQuery",
    "FilesystemBlobStore",
    "InvariantViolation",
    "init_db",
    "write_transaction",
]
