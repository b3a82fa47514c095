"""gateway 测试配置 -- httpx AsyncClient + 手动初始化的 Store"""

import os
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

ALICE = {"X-Principal-Id": "u-alice", "X-Principal-Name": "alice"}
BOB = {"X-Principal-Id": "u-bob", "X-Principal-Name": "bob"}


@pytest_asyncio.fixture
async def app(store_group):
    """创建测试用 FastAPI app，手动注入 store_group（ASGITransport 不触发 lifespan）"""
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from agenthub.gateway.main import create_app

    application = create_app()
    application.state.store_group = store_group
    yield application

    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def alice_bot(client: AsyncClient) -> dict:
    """alice/bot，尚未发布版本"""
    resp = await client.post(
        "/api/v1/agents",
        json={"name": "bot", "description": "A helpful bot", "category": "assistant"},
        headers=ALICE,
    )
    assert resp.status_code == 201
    return resp.json()
