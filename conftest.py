"""全局 pytest 配置 -- 环境变量隔离

async 测试由 pytest-asyncio 的 asyncio_mode = "auto" 支持（见 pyproject.toml）。
"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """清除 COMMENTPILOT_* 环境变量，关闭 Logfire，避免本机配置影响测试"""
    for key in list(os.environ):
        if key.startswith("COMMENTPILOT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")
