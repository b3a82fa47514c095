"""端到端流程测试

测试内容：
1. alice/bot: 1.0.0 (A) -> 1.1.0 (B)，resolve 与 pull 行为
2. 并发 HTTP 发布同一版本号：一个 201、一个 409
3. 并发 HTTP 发布不同版本号：恰好一个 latest
4. coding 分类按下载量分页：total=5
5. 重启后数据保留
"""

import asyncio
from pathlib import Path

from agenthub.gateway.main import create_app
from httpx import ASGITransport, AsyncClient

ALICE = {"X-Principal-Id": "u-alice", "X-Principal-Name": "alice"}


def spec_text(marker: str) -> str:
    return f"metadata:\n  name: bot\n  description: {marker}\nruntime:\n  type: prompt\n"


async def create(client: AsyncClient, name: str, **fields) -> dict:
    resp = await client.post("/api/v1/agents", json={"name": name, **fields}, headers=ALICE)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def publish(client: AsyncClient, name: str, version: str, spec: str):
    return await client.post(
        f"/api/v1/agents/alice/{name}/versions",
        json={"version": version, "spec": spec},
        headers=ALICE,
    )


class TestPublishAndResolve:
    async def test_supersede_and_resolve(self, client: AsyncClient):
        await create(client, "bot")
        spec_a, spec_b = spec_text("A"), spec_text("B")
        assert (await publish(client, "bot", "1.0.0", spec_a)).status_code == 201
        assert (await publish(client, "bot", "1.1.0", spec_b)).status_code == 201

        latest = (await client.get("/api/v1/resolve", params={"ref": "alice/bot"})).json()
        explicit = (await client.get("/api/v1/resolve", params={"ref": "alice/bot@latest"})).json()
        assert latest["version"]["version"] == explicit["version"]["version"] == "1.1.0"

        pinned = (await client.get("/api/v1/agents/alice/bot/versions/1.0.0")).json()
        assert pinned["spec"] == spec_a
        assert pinned["is_latest"] is False

        current = (await client.get("/api/v1/agents/alice/bot/versions/latest")).json()
        assert current["spec"] == spec_b

        agent = (await client.get("/api/v1/agents/alice/bot")).json()["agent"]
        assert agent["downloads"] == 2

    async def test_racing_same_version(self, client: AsyncClient):
        await create(client, "bot")
        responses = await asyncio.gather(
            publish(client, "bot", "2.0.0", spec_text("one")),
            publish(client, "bot", "2.0.0", spec_text("two")),
        )
        assert sorted(r.status_code for r in responses) == [201, 409]

        winner = next(r for r in responses if r.status_code == 201).json()
        latest = (await client.get("/api/v1/resolve", params={"ref": "alice/bot"})).json()
        assert latest["version"]["digest"] == winner["digest"]

    async def test_racing_distinct_versions(self, client: AsyncClient):
        await create(client, "bot")
        responses = await asyncio.gather(
            *(publish(client, "bot", f"3.{i}.0", spec_text(str(i))) for i in range(6))
        )
        assert all(r.status_code == 201 for r in responses)

        versions = (await client.get("/api/v1/agents/alice/bot/versions")).json()["versions"]
        assert len(versions) == 6
        assert sum(v["is_latest"] for v in versions) == 1
        # 最近发布在前，且即为 latest
        assert versions[0]["is_latest"] is True

    async def test_large_spec_round_trip(self, client: AsyncClient, registry_env: Path):
        """超过 inline 阈值的 spec 写入 blob 目录并可完整取回"""
        await create(client, "big")
        spec = spec_text("big") + "# filler line\n" * 100
        resp = await publish(client, "big", "1.0.0", spec)
        assert resp.status_code == 201

        blobs = [p for p in (registry_env / "blobs").rglob("*") if p.is_file()]
        assert len(blobs) == 1

        content = await client.get("/api/v1/agents/alice/big/versions/1.0.0/content")
        assert content.text == spec


class TestCatalogListing:
    async def test_category_downloads_pagination(self, client: AsyncClient):
        """5 个 coding agent 按下载量排序，第一页两条为下载量最高者，total=5"""
        downloads = {"c0": 3, "c1": 7, "c2": 1, "c3": 5, "c4": 0}
        for name, count in downloads.items():
            await create(client, name, category="coding")
            await publish(client, name, "1.0.0", spec_text(name))
            for _ in range(count):
                await client.get(f"/api/v1/agents/alice/{name}/versions/latest")
        await create(client, "essay", category="writing")

        resp = await client.get(
            "/api/v1/agents",
            params={"category": "coding", "sort": "downloads", "page": 1, "page_size": 2},
        )
        data = resp.json()
        assert data["total"] == 5
        assert [a["name"] for a in data["agents"]] == ["c1", "c3"]

        page3 = (
            await client.get(
                "/api/v1/agents",
                params={"category": "coding", "sort": "downloads", "page": 3, "page_size": 2},
            )
        ).json()
        assert [a["name"] for a in page3["agents"]] == ["c4"]


async def test_data_survives_restart(registry_env: Path):
    """关闭应用后重新启动，已发布版本仍可解析"""
    app = create_app()
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            await create(client, "bot")
            await publish(client, "bot", "1.0.0", spec_text("persisted"))

    restarted = create_app()
    async with restarted.router.lifespan_context(restarted):
        async with AsyncClient(
            transport=ASGITransport(app=restarted), base_url="http://test"
        ) as client:
            resp = await client.get("/api/v1/resolve", params={"ref": "alice/bot@1.0.0"})
            assert resp.status_code == 200
            assert resp.json()["version"]["is_latest"] is True
