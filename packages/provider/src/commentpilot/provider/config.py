"""ProviderConfig -- 生成模型配置加载

从环境变量加载配置。生产环境与开发环境使用不同的推理服务地址。
"""

import os

import structlog
from commentpilot.core.config import is_production
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "gemma2:2b"


class ProviderConfig(BaseModel):
    """Provider 包配置 -- 从环境变量加载

    环境变量:
        COMMENTPILOT_LLM_URL_PROD / COMMENTPILOT_LLM_URL_DEV: 推理服务地址
        COMMENTPILOT_LLM_API_KEY: 推理服务访问密钥（Ollama 本地部署可留空）
        COMMENTPILOT_LLM_PROVIDER: LiteLLM provider 前缀（默认 ollama_chat）
        COMMENTPILOT_LLM_MODEL: 模型名（默认 gemma2:2b）
        COMMENTPILOT_LLM_TEMPERATURE: 采样温度（默认 0.7）
        COMMENTPILOT_LLM_MAX_RETRIES: 结构化任务最大尝试次数（默认 3）
        COMMENTPILOT_LLM_TIMEOUT_S: 单次调用超时（秒，默认 60）
    """

    base_url: str = Field(default=DEFAULT_BASE_URL, description="推理服务基础 URL")
    api_key: SecretStr = Field(default=SecretStr(""), description="推理服务访问密钥")
    provider: str = Field(default="ollama_chat", description="LiteLLM provider 前缀")
    model: str = Field(default=DEFAULT_MODEL, description="默认模型名")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="采样温度")
    max_retries: int = Field(default=3, ge=1, description="结构化任务最大尝试次数")
    call_retries: int = Field(
        default=2, ge=0, description="单次调用的传输层重试提示（透传给 LiteLLM）"
    )
    timeout_s: int = Field(default=60, ge=1, description="单次调用超时（秒）")


def _read_number(env_var: str, cast, default):
    """读取数值型环境变量，非法值记录告警并返回默认值"""
    val = os.environ.get(env_var)
    if not val:
        return None
    try:
        return cast(val)
    except ValueError:
        log.warning(
            "invalid_provider_config",
            env_var=env_var,
            value=val,
            fallback=default,
        )
        return None


def load_provider_config() -> ProviderConfig:
    """从环境变量加载 Provider 配置

    Returns:
        ProviderConfig 实例
    """
    kwargs: dict = {}

    url_var = (
        "COMMENTPILOT_LLM_URL_PROD" if is_production() else "COMMENTPILOT_LLM_URL_DEV"
    )
    if val := os.environ.get(url_var):
        kwargs["base_url"] = val.rstrip("/")

    if val := os.environ.get("COMMENTPILOT_LLM_API_KEY"):
        kwargs["api_key"] = SecretStr(val)

    if val := os.environ.get("COMMENTPILOT_LLM_PROVIDER"):
        kwargs["provider"] = val

    if val := os.environ.get("COMMENTPILOT_LLM_MODEL"):
        kwargs["model"] = val

    numeric = (
        ("temperature", "COMMENTPILOT_LLM_TEMPERATURE", float, 0.7),
        ("max_retries", "COMMENTPILOT_LLM_MAX_RETRIES", int, 3),
        ("timeout_s", "COMMENTPILOT_LLM_TIMEOUT_S", int, 60),
    )
    for field_name, env_var, cast, default in numeric:
        parsed = _read_number(env_var, cast, default)
        if parsed is not None:
            kwargs[field_name] = parsed

    return ProviderConfig(**kwargs)
