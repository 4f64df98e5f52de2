"""StructuredTaskExecutor -- 结构化生成 + 带错误反馈的有界重试

流程：
1. 渲染输入（记录序列 -> 编号文本，对象 -> JSON，标量透传）
2. 在 prompt 模板后追加结构化输出指令块（format_instructions + error 占位符）
3. 最多 max_retries 次尝试：
   - 第 2 次起将上一次错误写入 error 占位符，让模型自我修正
   - 单次调用生成模型 -> 去除代码块标记 -> 解析并校验
   - 成功立即返回；任何 ProviderError 记为 last_error 后继续
4. 全部失败抛出 StructuredTaskError（或在调用方显式提供 fallback 时返回 fallback）
"""

from collections.abc import AsyncIterator, Mapping
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel

from .client import LiteLLMClient
from .config import ProviderConfig
from .exceptions import ProviderError, StructuredTaskError
from .inputs import render_inputs
from .models import ModelOptions
from .parsing import parse_structured_output, strip_code_fences
from .prompt import STRUCTURED_OUTPUT_INSTRUCTIONS, format_instructions, render_template

log = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)


class StructuredTaskExecutor:
    """结构化任务执行器"""

    def __init__(
        self,
        client: LiteLLMClient,
        config: ProviderConfig | None = None,
    ) -> None:
        """
        Args:
            client: 生成模型客户端
            config: 默认模型参数来源（模型名、温度、地址、重试次数）
        """
        self._client = client
        self._config = config or ProviderConfig()

    def resolve_options(self, options: ModelOptions | None = None) -> ModelOptions:
        """用默认配置补齐调用方未指定的参数"""
        options = options or ModelOptions()
        return ModelOptions(
            model=options.model or self._config.model,
            temperature=(
                options.temperature
                if options.temperature is not None
                else self._config.temperature
            ),
            base_url=options.base_url or self._config.base_url,
            max_retries=options.max_retries or self._config.max_retries,
            call_retries=(
                options.call_retries
                if options.call_retries is not None
                else self._config.call_retries
            ),
        )

    async def run(
        self,
        prompt_template: str,
        input_data: Mapping[str, Any],
        schema: type[T],
        options: ModelOptions | None = None,
        fallback: T | None = None,
    ) -> T:
        """执行结构化任务

        Args:
            prompt_template: 含 {name} 占位符的 prompt 模板
            input_data: 占位符名 -> 输入值
            schema: 目标 pydantic 模型
            options: 模型参数，未指定字段使用默认配置
            fallback: 全部尝试失败时的返回值；None 表示失败时抛出异常

        Returns:
            schema 实例

        Raises:
            StructuredTaskError: 所有尝试均失败且未提供 fallback
        """
        resolved = self.resolve_options(options)
        max_retries = resolved.max_retries

        template = prompt_template + STRUCTURED_OUTPUT_INSTRUCTIONS
        values = render_inputs(input_data)
        values["format_instructions"] = format_instructions(schema)

        last_error: Exception | None = None
        for attempt in range(1, max_retries + 1):
            values["error"] = (
                "" if attempt == 1 else f"Previous attempt failed: {last_error}"
            )
            prompt = render_template(template, values)

            try:
                result = await self._client.complete(
                    prompt=prompt,
                    model=resolved.model,
                    temperature=resolved.temperature,
                    base_url=resolved.base_url,
                    call_retries=resolved.call_retries,
                )
                parsed = parse_structured_output(
                    strip_code_fences(result.content), schema
                )
            except ProviderError as e:
                last_error = e
                log.warning(
                    "structured_task_attempt_failed",
                    schema=schema.__name__,
                    attempt=attempt,
                    max_retries=max_retries,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            log.info(
                "structured_task_completed",
                schema=schema.__name__,
                attempt=attempt,
                model=resolved.model,
            )
            return parsed

        if fallback is not None:
            log.warning(
                "structured_task_fallback_used",
                schema=schema.__name__,
                attempts=max_retries,
                last_error=str(last_error),
            )
            return fallback

        log.error(
            "structured_task_failed",
            schema=schema.__name__,
            attempts=max_retries,
            last_error=str(last_error),
        )
        raise StructuredTaskError(attempts=max_retries, last_error=last_error)

    async def stream(
        self,
        prompt_template: str,
        input_data: Mapping[str, Any],
        options: ModelOptions | None = None,
    ) -> AsyncIterator[str]:
        """流式生成自由文本（无 schema 约束、无重试），按到达顺序产出文本块"""
        resolved = self.resolve_options(options)
        prompt = render_template(prompt_template, render_inputs(input_data))
        async for chunk in self._client.stream(
            prompt=prompt,
            model=resolved.model,
            temperature=resolved.temperature,
            base_url=resolved.base_url,
            call_retries=resolved.call_retries,
        ):
            yield chunk
