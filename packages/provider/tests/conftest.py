"""Provider 包测试 fixtures"""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def mock_client():
    """Mock LiteLLMClient，complete() 的返回值由各测试通过 side_effect 设置"""
    client = AsyncMock()
    client.complete = AsyncMock()
    return client


@pytest.fixture
def sample_thread() -> list[dict[str, str]]:
    """讨论串测试数据"""
    return [
        {"author": "A", "text": "hi"},
        {"author": "B", "text": "yo"},
    ]
