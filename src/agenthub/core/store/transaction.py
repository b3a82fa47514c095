"""写事务封装

每个写操作在独立连接上以 BEGIN IMMEDIATE 开启事务，
成功提交、任何异常回滚后重新抛出。SQLite 写锁 + busy_timeout
负责串行化并发写入，进程内不持有全局锁。
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from .sqlite_init import configure_connection


@asynccontextmanager
async def write_transaction(db_path: str) -> AsyncIterator[aiosqlite.Connection]:
    """在独立连接上执行一个全有或全无的写事务

    Args:
        db_path: SQLite 数据库文件路径

    Yields:
        已处于事务中的连接

    Raises:
        Exception: 事务体内的任何异常，回滚后原样抛出
    """
    conn = await aiosqlite.connect(db_path, isolation_level=None)
    conn.row_factory = aiosqlite.Row
    try:
        await configure_connection(conn)
        await conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            await conn.rollback()
            raise
        await conn.commit()
    finally:
        await conn.close()


def is_unique_violation(error: aiosqlite.IntegrityError) -> bool:
    """判断 IntegrityError 是否为唯一约束冲突"""
    return "UNIQUE constraint failed" in str(error)
