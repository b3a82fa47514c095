"""写事务单元测试 -- 提交与回滚"""

import pytest
from agenthub.core.store.sqlite_init import verify_wal_mode
from agenthub.core.store.transaction import write_transaction


class TestWriteTransaction:
    async def test_commit_visible_to_shared_connection(self, store_group):
        async with write_transaction(store_group.db_path) as conn:
            await conn.execute(
                """
                INSERT INTO artifacts (artifact_id, namespace, name, owner_id, created_at, updated_at)
                VALUES ('01JTXN0000000000000000001', 'alice', 'bot', 'u-alice', 't', 't')
                """
            )

        cursor = await store_group.conn.execute("SELECT COUNT(*) FROM artifacts")
        assert (await cursor.fetchone())[0] == 1

    async def test_rollback_on_exception(self, store_group):
        """事务体抛出异常时整体回滚，异常原样抛出"""
        with pytest.raises(RuntimeError, match="boom"):
            async with write_transaction(store_group.db_path) as conn:
                await conn.execute(
                    """
                    INSERT INTO artifacts (artifact_id, namespace, name, owner_id,
                                           created_at, updated_at)
                    VALUES ('01JTXN0000000000000000002', 'alice', 'bot', 'u-alice', 't', 't')
                    """
                )
                raise RuntimeError("boom")

        cursor = await store_group.conn.execute("SELECT COUNT(*) FROM artifacts")
        assert (await cursor.fetchone())[0] == 0

    async def test_wal_mode(self, store_group):
        assert await verify_wal_mode(store_group.conn)

    async def test_init_db_idempotent(self, store_group):
        from agenthub.core.store.sqlite_init import init_db

        await init_db(store_group.conn)
        cursor = await store_group.conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'index' AND name = 'idx_versions_single_latest'"
        )
        assert await cursor.fetchone() is not None
