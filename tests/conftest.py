"""全局 pytest 配置 -- 临时 SQLite 数据库与 Store 实例组 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from agenthub.core.config import RegistryConfig
from agenthub.core.store import StoreGroup, create_store_group

# 测试用小阈值：超过 1 KiB 的 payload 走 blob store
TEST_INLINE_THRESHOLD = 1024
TEST_MAX_PAYLOAD_BYTES = 64 * 1024


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> str:
    """提供临时 SQLite 数据库路径"""
    return str(tmp_path / "sqlite" / "test.db")


@pytest_asyncio.fixture
async def tmp_blobs_dir(tmp_path: Path) -> Path:
    """提供临时 blob 目录"""
    return tmp_path / "blobs"


@pytest_asyncio.fixture
async def registry_config() -> RegistryConfig:
    return RegistryConfig(
        default_page_size=20,
        max_page_size=100,
        max_payload_bytes=TEST_MAX_PAYLOAD_BYTES,
        inline_threshold=TEST_INLINE_THRESHOLD,
    )


@pytest_asyncio.fixture
async def store_group(
    tmp_db_path: str,
    tmp_blobs_dir: Path,
    registry_config: RegistryConfig,
) -> AsyncGenerator[StoreGroup, None]:
    """提供已初始化的 Store 实例组"""
    group = await create_store_group(tmp_db_path, tmp_blobs_dir, registry_config)
    yield group
    await group.close()
