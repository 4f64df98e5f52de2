"""集成测试共享 fixture

使用真实的 LiteLLMClient（仅替换 litellm.acompletion）和 MockTransport 存储服务，
覆盖 路由 -> 服务 -> 执行器 -> 客户端 的完整链路。
"""

from collections.abc import AsyncGenerator
from unittest.mock import MagicMock, patch

import httpx
import pytest
import pytest_asyncio
from commentpilot.provider import ProviderConfig
from httpx import ASGITransport, AsyncClient


class ModelScript:
    """按顺序返回预设的模型输出，并记录收到的调用参数"""

    def __init__(self) -> None:
        self.outputs: list[str] = []
        self.calls: list[dict] = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        response = MagicMock()
        response.model = kwargs["model"]
        response.choices = [MagicMock()]
        response.choices[0].message.content = self.outputs.pop(0)
        response.usage = None
        return response


@pytest.fixture
def model_script():
    script = ModelScript()
    with patch("commentpilot.provider.client.acompletion", new=script):
        yield script


@pytest.fixture
def stored_payloads() -> list[httpx.Request]:
    return []


@pytest_asyncio.fixture
async def integration_app(model_script, stored_payloads):
    """集成测试用 FastAPI app"""
    from commentpilot.gateway.main import create_app, init_app_state

    def storage_handler(request: httpx.Request) -> httpx.Response:
        stored_payloads.append(request)
        return httpx.Response(200, json={"saved": True})

    app = create_app()
    async with httpx.AsyncClient(transport=httpx.MockTransport(storage_handler)) as http:
        init_app_state(app, ProviderConfig(), http, "http://wp.test")
        yield app


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
