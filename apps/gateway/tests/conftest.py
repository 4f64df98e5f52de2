"""apps/gateway 测试配置 -- 注入 Mock 生成模型 + MockTransport 存储服务"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from commentpilot.provider import ProviderConfig
from httpx import ASGITransport, AsyncClient

STORAGE_BASE_URL = "http://wp.test"


class FakeStorage:
    """记录收到的存储请求，按 status_code 应答"""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": self.status_code < 300})


@pytest.fixture
def llm_client():
    """Mock 生成模型客户端，complete() 返回值由各测试设置"""
    client = AsyncMock()
    client.complete = AsyncMock()
    client.health_check = AsyncMock(return_value=True)
    return client


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest_asyncio.fixture
async def app(llm_client, storage):
    """创建测试用 FastAPI app 实例（绕过 lifespan，手动组装服务）"""
    from commentpilot.gateway.main import create_app, init_app_state

    application = create_app()
    async with httpx.AsyncClient(transport=httpx.MockTransport(storage.handler)) as http:
        init_app_state(
            application,
            ProviderConfig(),
            http,
            STORAGE_BASE_URL,
            llm_client=llm_client,
        )
        yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
