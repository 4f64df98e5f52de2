"""ModerationService -- 单条评论的审核流程编排

状态机: received -> analyzing -> {stored, store_failed, failed} -> responded

1. 前置检查：评论内容为空时直接拒绝，不推送任何事件
2. 向订阅者推送 analyzing 事件
3. 执行结构化审核任务
   - 失败：推送 failed 事件，向调用方返回通用错误
4. 将审核结论写入外部存储
   - 2xx：推送 done 事件
   - 其他：推送 failed 事件（含状态码或传输错误）；调用方仍拿到审核结论
5. 返回审核结论

事件始终按 user_id 路由，comment_id 只作为事件 payload。
"""

import structlog
from commentpilot.core.config import COMMENT_PREVIEW_LENGTH
from commentpilot.core.models import (
    CommentRequest,
    InvalidStateTransition,
    ModerationDecision,
    ModerationEvent,
    ModerationState,
    ModerationStatus,
    validate_transition,
)
from commentpilot.provider import ModelOptions, StructuredTaskError, StructuredTaskExecutor

from .channel_registry import ChannelRegistry
from .prompts import MODERATION_PROMPT
from .storage_client import ModerationStorageClient, StorageResult

log = structlog.get_logger()

# 返回给调用方和订阅者的通用错误文本，诊断细节只进日志
MODERATION_FAILED_MESSAGE = "AI moderation failed"


class ModerationError(Exception):
    """审核流程异常基类"""

    status_code = 500


class InvalidCommentError(ModerationError):
    """前置条件失败：缺少评论内容"""

    status_code = 400


class ModerationFailedError(ModerationError):
    """结构化审核任务在重试预算内未能产出合法结论"""

    status_code = 500


class ModerationRun:
    """单次审核请求的状态跟踪"""

    def __init__(self, comment_id: str | None, user_id: str | None) -> None:
        self.comment_id = comment_id
        self.user_id = user_id
        self.state = ModerationState.RECEIVED

    def transition(self, to_state: ModerationState) -> None:
        if not validate_transition(self.state, to_state):
            raise InvalidStateTransition(self.state, to_state)
        log.debug(
            "moderation_state_transition",
            comment_id=self.comment_id,
            from_state=self.state,
            to_state=to_state,
        )
        self.state = to_state


class ModerationService:
    """评论审核业务服务"""

    def __init__(
        self,
        executor: StructuredTaskExecutor,
        registry: ChannelRegistry,
        storage: ModerationStorageClient,
        model_options: ModelOptions | None = None,
    ) -> None:
        self._executor = executor
        self._registry = registry
        self._storage = storage
        self._model_options = model_options

    async def moderate(self, request: CommentRequest) -> ModerationDecision:
        """审核一条评论

        Returns:
            校验通过的 ModerationDecision（无论是否成功写入存储）

        Raises:
            InvalidCommentError: 评论内容为空
            ModerationFailedError: 结构化审核任务最终失败或执行异常
        """
        if not request.has_comment():
            raise InvalidCommentError("comment is required")

        run = ModerationRun(request.comment_id, request.user_id)
        log.info(
            "moderation_received",
            comment_id=run.comment_id,
            user_id=run.user_id,
            comment_preview=request.comment[:COMMENT_PREVIEW_LENGTH],
            thread_length=len(request.thread),
        )

        run.transition(ModerationState.ANALYZING)
        await self._notify(run, ModerationStatus.ANALYZING)

        try:
            decision = await self._executor.run(
                MODERATION_PROMPT,
                {"comment": request.comment, "thread": request.thread},
                ModerationDecision,
                options=self._model_options,
            )
        except StructuredTaskError as e:
            log.error(
                "moderation_analysis_failed",
                comment_id=run.comment_id,
                attempts=e.attempts,
                last_error=str(e.last_error),
            )
            await self._finish_failed(run)
            raise ModerationFailedError(MODERATION_FAILED_MESSAGE) from e
        except Exception as e:
            # 执行器之外的意外异常同样以 failed 事件结束，订阅者总能收到终态
            log.exception(
                "moderation_analysis_crashed",
                comment_id=run.comment_id,
                error_type=type(e).__name__,
            )
            await self._finish_failed(run)
            raise ModerationFailedError(MODERATION_FAILED_MESSAGE) from e

        result = await self._store(run, decision)
        if result.ok:
            run.transition(ModerationState.STORED)
            await self._notify(run, ModerationStatus.DONE)
        else:
            run.transition(ModerationState.STORE_FAILED)
            await self._notify(run, ModerationStatus.FAILED, error=result.error)

        run.transition(ModerationState.RESPONDED)
        log.info(
            "moderation_completed",
            comment_id=run.comment_id,
            approved=decision.approved,
            sentiment=decision.sentiment,
            stored=result.ok,
        )
        return decision

    async def _finish_failed(self, run: ModerationRun) -> None:
        run.transition(ModerationState.FAILED)
        await self._notify(run, ModerationStatus.FAILED, error=MODERATION_FAILED_MESSAGE)
        run.transition(ModerationState.RESPONDED)

    async def _store(self, run: ModerationRun, decision: ModerationDecision) -> StorageResult:
        if not run.comment_id:
            log.warning("moderation_store_skipped_no_comment_id", user_id=run.user_id)
            return StorageResult(ok=False, error="commentId missing")
        return await self._storage.store(run.comment_id, decision)

    async def _notify(
        self,
        run: ModerationRun,
        status: ModerationStatus,
        error: str | None = None,
    ) -> None:
        event = ModerationEvent(status=status, comment_id=run.comment_id, error=error)
        await self._registry.send_to(run.user_id, event.to_wire())
