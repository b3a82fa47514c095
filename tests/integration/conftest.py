"""集成测试共享 fixture -- 通过 lifespan 启动完整应用"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.fixture
def registry_env(monkeypatch, tmp_path: Path) -> Path:
    """集成测试环境变量（数据目录位于 tmp_path）"""
    monkeypatch.setenv("AGENTHUB_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("AGENTHUB_DB_PATH", raising=False)
    monkeypatch.delenv("AGENTHUB_BLOBS_DIR", raising=False)
    monkeypatch.setenv("AGENTHUB_INLINE_THRESHOLD", "512")
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")
    return tmp_path / "data"


@pytest_asyncio.fixture
async def integration_app(registry_env: Path):
    """集成测试用 FastAPI app（真实 lifespan：建库、注入 store_group、关闭连接）"""
    from agenthub.gateway.main import create_app

    app = create_app()
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
