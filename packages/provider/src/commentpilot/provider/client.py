"""LiteLLMClient -- 生成模型调用封装

通过 litellm.acompletion() 调用推理服务（默认 Ollama），支持单次调用与流式调用。
"""

import time
from collections.abc import AsyncIterator

import httpx
import structlog
from litellm import acompletion

from .exceptions import ProviderError, ProviderUnreachableError
from .models import ModelCallResult, TokenUsage

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5

# 连接类异常类型集合（触发 ProviderUnreachableError）
_CONNECTION_ERROR_TYPES = (
    ConnectionError,
    OSError,
    TimeoutError,
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.TimeoutException,
)


def _is_connection_error(e: Exception) -> bool:
    """判断异常是否为连接类错误（推理服务不可达）"""
    if isinstance(e, _CONNECTION_ERROR_TYPES):
        return True
    # LiteLLM 的 APIConnectionError 也属于连接类错误
    error_name = type(e).__name__
    return error_name in ("APIConnectionError", "APITimeoutError")


def _parse_usage(response) -> TokenUsage:
    """从 LiteLLM 响应解析 token 使用数据，失败时返回全零"""
    usage = getattr(response, "usage", None)
    if usage is None:
        return TokenUsage()
    return TokenUsage(
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
        total_tokens=getattr(usage, "total_tokens", 0) or 0,
    )


class LiteLLMClient:
    """推理服务客户端

    封装 litellm.acompletion()。模型名不含 provider 前缀时自动补上
    （如 gemma2:2b -> ollama_chat/gemma2:2b）。
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        api_key: str = "",
        provider: str = "ollama_chat",
        timeout_s: int = 60,
    ) -> None:
        """初始化客户端

        Args:
            base_url: 默认推理服务地址（单次调用可覆盖）
            api_key: 推理服务访问密钥
            provider: LiteLLM provider 前缀
            timeout_s: 请求超时（秒）
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._provider = provider
        self._timeout_s = timeout_s

    @property
    def base_url(self) -> str:
        return self._base_url

    def _qualify(self, model: str) -> str:
        if "/" in model:
            return model
        return f"{self._provider}/{model}"

    def _build_kwargs(
        self,
        prompt: str,
        model: str,
        temperature: float,
        base_url: str | None,
        call_retries: int,
    ) -> dict:
        return {
            "model": self._qualify(model),
            "messages": [{"role": "user", "content": prompt}],
            "api_base": (base_url or self._base_url).rstrip("/"),
            "api_key": self._api_key or None,
            "temperature": temperature,
            "timeout": self._timeout_s,
            "num_retries": call_retries,
        }

    def _wrap_error(self, e: Exception, base_url: str | None) -> ProviderError:
        # 区分连接类错误与业务错误
        if _is_connection_error(e):
            return ProviderUnreachableError(
                base_url=base_url or self._base_url,
                original_error=e,
            )
        return ProviderError(message=f"LLM 调用失败: {e}", recoverable=True)

    async def complete(
        self,
        prompt: str,
        model: str,
        temperature: float = 0.7,
        base_url: str | None = None,
        call_retries: int = 2,
    ) -> ModelCallResult:
        """单次调用：发送完整 prompt，返回完整文本

        Args:
            prompt: 已渲染的 prompt
            model: 模型名
            temperature: 采样温度
            base_url: 推理服务地址，None 使用默认
            call_retries: 传输层重试次数（由 LiteLLM 内部处理）

        Returns:
            ModelCallResult

        Raises:
            ProviderUnreachableError: 推理服务连接失败或超时
            ProviderError: 推理服务返回错误
        """
        start_time = time.monotonic()
        call_kwargs = self._build_kwargs(prompt, model, temperature, base_url, call_retries)

        log.debug(
            "llm_call_start",
            model=call_kwargs["model"],
            api_base=call_kwargs["api_base"],
            prompt_chars=len(prompt),
        )

        # 响应结构异常（如 choices 为空）同样包装为 ProviderError，由上层重试
        try:
            response = await acompletion(**call_kwargs)
            content = response.choices[0].message.content or ""
        except Exception as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            log.error(
                "llm_call_failed",
                model=call_kwargs["model"],
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms,
            )
            raise self._wrap_error(e, base_url) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        model_name = getattr(response, "model", "") or call_kwargs["model"]

        log.info(
            "llm_call_completed",
            model=model_name,
            duration_ms=duration_ms,
            response_chars=len(content),
        )

        return ModelCallResult(
            content=content,
            model_name=model_name,
            duration_ms=duration_ms,
            token_usage=_parse_usage(response),
        )

    async def stream(
        self,
        prompt: str,
        model: str,
        temperature: float = 0.7,
        base_url: str | None = None,
        call_retries: int = 2,
    ) -> AsyncIterator[str]:
        """流式调用：按到达顺序逐块产出文本，推理服务结束输出时终止

        Raises:
            ProviderUnreachableError / ProviderError: 同 complete()
        """
        call_kwargs = self._build_kwargs(prompt, model, temperature, base_url, call_retries)
        call_kwargs["stream"] = True

        try:
            response = await acompletion(**call_kwargs)
            async for chunk in response:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    yield text
        except Exception as e:
            log.error(
                "llm_stream_failed",
                model=call_kwargs["model"],
                error=str(e),
                error_type=type(e).__name__,
            )
            raise self._wrap_error(e, base_url) from e

        log.info("llm_stream_completed", model=call_kwargs["model"])

    async def health_check(self) -> bool:
        """检查推理服务可达性

        发送 GET {base_url}/api/tags 请求（Ollama 模型列表接口）。

        Returns:
            True 如果服务可用，False 如果不可达或异常

        注意: 此方法不抛出异常，所有异常内部捕获并返回 False。
        """
        url = f"{self._base_url}/api/tags"
        try:
            async with httpx.AsyncClient() as http_client:
                resp = await http_client.get(url, timeout=HEALTH_CHECK_TIMEOUT_S)
                return resp.status_code == 200
        except Exception as e:
            log.debug("health_check_failed", url=url, error=str(e))
            return False
