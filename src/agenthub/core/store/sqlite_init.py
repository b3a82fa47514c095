"""SQLite 数据库初始化

PRAGMA 配置 + 两张表 DDL + 索引创建。
唯一性不变量全部下沉为数据库约束，避免 check-then-insert 竞态。
"""

import aiosqlite

# artifacts 表 DDL
_ARTIFACTS_DDL = """
CREATE TABLE IF NOT EXISTS artifacts (
    artifact_id  TEXT PRIMARY KEY,
    namespace    TEXT NOT NULL,
    name         TEXT NOT NULL,
    description  TEXT NOT NULL DEFAULT '',
    category     TEXT NOT NULL DEFAULT 'other',
    tags         TEXT NOT NULL DEFAULT '[]',
    visibility   TEXT NOT NULL DEFAULT 'public',
    license      TEXT NOT NULL DEFAULT '',
    homepage     TEXT NOT NULL DEFAULT '',
    repository   TEXT NOT NULL DEFAULT '',
    downloads    INTEGER NOT NULL DEFAULT 0 CHECK (downloads >= 0),
    likes        INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0),
    owner_id     TEXT NOT NULL,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL,

    UNIQUE (namespace, name)
);
"""

_ARTIFACTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_artifacts_visibility ON artifacts(visibility);",
    "CREATE INDEX IF NOT EXISTS idx_artifacts_category ON artifacts(category);",
    "CREATE INDEX IF NOT EXISTS idx_artifacts_owner ON artifacts(owner_id);",
    "CREATE INDEX IF NOT EXISTS idx_artifacts_updated_at ON artifacts(updated_at DESC);",
]

# versions 表 DDL
_VERSIONS_DDL = """
CREATE TABLE IF NOT EXISTS versions (
    version_id    TEXT PRIMARY KEY,
    artifact_id   TEXT NOT NULL,
    version       TEXT NOT NULL CHECK (version <> ''),
    digest        TEXT NOT NULL,
    size          INTEGER NOT NULL DEFAULT 0,
    payload       BLOB,
    changelog     TEXT NOT NULL DEFAULT '',
    is_latest     INTEGER NOT NULL DEFAULT 0,
    status        TEXT NOT NULL DEFAULT 'active',
    published_at  TEXT NOT NULL,
    published_by  TEXT NOT NULL,
    downloads     INTEGER NOT NULL DEFAULT 0 CHECK (downloads >= 0),

    UNIQUE (artifact_id, version),
    FOREIGN KEY (artifact_id) REFERENCES artifacts(artifact_id) ON DELETE CASCADE
);
"""

_VERSIONS_INDEXES = [
    # 每个 artifact 至多一个 latest 版本（仅对 is_latest = 1 的行生效）
    (
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_versions_single_latest "
        "ON versions(artifact_id) WHERE is_latest = 1;"
    ),
    "CREATE INDEX IF NOT EXISTS idx_versions_published ON versions(artifact_id, published_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_versions_digest ON versions(digest);",
]


async def configure_connection(conn: aiosqlite.Connection) -> None:
    """每个连接都需要的 PRAGMA（foreign_keys/busy_timeout 是连接级设置）"""
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await configure_connection(conn)

    await conn.execute(_ARTIFACTS_DDL)
    await conn.execute(_VERSIONS_DDL)

    for idx_sql in _ARTIFACTS_INDEXES + _VERSIONS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效"""
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
