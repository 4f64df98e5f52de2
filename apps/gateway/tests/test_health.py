"""健康检查测试

测试内容：
1. GET /health 返回 200 + ok
2. GET /ready 默认 profile 不探测推理服务
3. profile=llm/full 探测推理服务，不可达时返回 503
4. 存储回调未配置时标记 not_configured，不算失败
"""

import httpx
import pytest
from commentpilot.provider import ProviderConfig
from httpx import ASGITransport, AsyncClient


class TestHealth:
    async def test_health_returns_200(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestReady:
    async def test_ready_core_profile(self, client: AsyncClient, llm_client):
        resp = await client.get("/ready")

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ready"
        assert data["profile"] == "core"
        assert data["checks"] == {
            "channel_registry": "ok",
            "subscribers": 0,
            "storage": "configured",
            "llm": "skipped",
        }
        llm_client.health_check.assert_not_awaited()

    @pytest.mark.parametrize("profile", ["llm", "full"])
    async def test_ready_llm_reachable(self, client: AsyncClient, llm_client, profile):
        resp = await client.get("/ready", params={"profile": profile})

        assert resp.status_code == 200
        assert resp.json()["checks"]["llm"] == "ok"
        llm_client.health_check.assert_awaited_once()

    async def test_ready_llm_unreachable(self, client: AsyncClient, llm_client):
        llm_client.health_check.return_value = False

        resp = await client.get("/ready", params={"profile": "llm"})

        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "not_ready"
        assert data["checks"]["llm"] == "unreachable"

    async def test_ready_health_check_exception(self, client: AsyncClient, llm_client):
        llm_client.health_check.side_effect = RuntimeError("boom")

        resp = await client.get("/ready", params={"profile": "llm"})

        assert resp.status_code == 503
        assert resp.json()["checks"]["llm"] == "unreachable"

    async def test_ready_counts_subscribers(self, client: AsyncClient, app):
        await app.state.channel_registry.register("u-1", object())

        resp = await client.get("/ready")

        assert resp.json()["checks"]["subscribers"] == 1

    async def test_storage_not_configured(self, llm_client):
        from commentpilot.gateway.main import create_app, init_app_state

        app = create_app()
        async with httpx.AsyncClient() as http:
            init_app_state(app, ProviderConfig(), http, "", llm_client=llm_client)
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://test"
            ) as ac:
                resp = await ac.get("/ready")

        assert resp.status_code == 200
        assert resp.json()["checks"]["storage"] == "not_configured"

    async def test_ready_not_initialized(self):
        from commentpilot.gateway.main import create_app

        app = create_app()
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            resp = await ac.get("/ready")

        assert resp.status_code == 503
        assert resp.json()["checks"]["channel_registry"] == "error: not initialized"
