"""AnalysisService -- 尽力而为的评论分析与流式回复

与审核流程不同，这里优先可用性：分析失败时返回中性默认结果，而不是报错。
"""

from collections.abc import AsyncIterator

import structlog
from commentpilot.core.models import CommentAnalysis, CommentRequest
from commentpilot.provider import ModelOptions, StructuredTaskExecutor

from .moderation_service import InvalidCommentError
from .prompts import ANALYSIS_PROMPT, REPLY_PROMPT

log = structlog.get_logger()


class AnalysisService:
    """评论分析业务服务"""

    def __init__(
        self,
        executor: StructuredTaskExecutor,
        model_options: ModelOptions | None = None,
    ) -> None:
        self._executor = executor
        self._model_options = model_options

    async def analyze(self, request: CommentRequest) -> tuple[CommentAnalysis, bool]:
        """分析评论情感、标题并给出建议回复

        Returns:
            (analysis, is_fallback) -- is_fallback=True 表示使用了中性默认值
        """
        if not request.has_comment():
            raise InvalidCommentError("comment is required")

        neutral = CommentAnalysis.neutral()
        analysis = await self._executor.run(
            ANALYSIS_PROMPT,
            {"comment": request.comment, "thread": request.thread},
            CommentAnalysis,
            options=self._model_options,
            fallback=neutral,
        )
        return analysis, analysis is neutral

    async def stream_reply(self, request: CommentRequest) -> AsyncIterator[str]:
        """流式生成建议回复"""
        if not request.has_comment():
            raise InvalidCommentError("comment is required")

        log.info("reply_stream_started", thread_length=len(request.thread))
        async for chunk in self._executor.stream(
            REPLY_PROMPT,
            {"comment": request.comment, "thread": request.thread},
            options=self._model_options,
        ):
            yield chunk
