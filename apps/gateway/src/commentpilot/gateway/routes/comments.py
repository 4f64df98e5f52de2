"""评论 AI 路由

GET  /api/v1/ai-comments: 路由连通性检查
POST /api/v1/ai-comments/moderate: 审核评论，返回审核结论，并向订阅者推送进度事件
POST /api/v1/ai-comments/analyze: 尽力而为的评论分析（情感/标题/建议回复）
POST /api/v1/ai-comments/reply/stream: SSE 流式生成建议回复
"""

import json

import structlog
from commentpilot.core.models import CommentRequest
from commentpilot.provider import ProviderError
from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse
from starlette.responses import JSONResponse

from ..deps import get_analysis_service, get_moderation_service
from ..services.analysis_service import AnalysisService
from ..services.moderation_service import ModerationError, ModerationService

log = structlog.get_logger()

API_PREFIX = "/api/v1/ai-comments"

router = APIRouter(prefix=API_PREFIX)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("")
async def comments_root():
    """路由连通性检查"""
    return {"message": "AI Comments route is working"}


@router.post("/moderate")
async def moderate_comment(
    body: CommentRequest,
    service: ModerationService = Depends(get_moderation_service),
):
    """审核评论

    - 成功返回 200 {success: true, ai: <decision>}（存储失败不影响响应）
    - 缺少评论返回 400，审核失败返回 500，均为 {error: <message>}
    """
    try:
        decision = await service.moderate(body)
    except ModerationError as e:
        return _error_response(e.status_code, str(e))

    return {"success": True, "ai": decision.model_dump(mode="json")}


@router.post("/analyze")
async def analyze_comment(
    body: CommentRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    """分析评论，模型失败时返回中性默认值（fallback=true）"""
    try:
        analysis, is_fallback = await service.analyze(body)
    except ModerationError as e:
        return _error_response(e.status_code, str(e))

    return {
        "success": True,
        "ai": analysis.model_dump(mode="json"),
        "fallback": is_fallback,
    }


@router.post("/reply/stream")
async def stream_reply(
    body: CommentRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    """SSE 流式生成建议回复

    每个文本块推送 {"chunk": "..."}，结束时推送 {"done": true}，
    生成失败时推送 {"error": "..."} 后关闭。
    """
    if not body.has_comment():
        return _error_response(400, "comment is required")

    async def event_generator():
        try:
            async for chunk in service.stream_reply(body):
                yield {"data": json.dumps({"chunk": chunk}, ensure_ascii=False)}
        except ProviderError as e:
            log.error("reply_stream_failed", error=str(e))
            yield {"data": json.dumps({"error": "AI reply generation failed"})}
            return
        yield {"data": json.dumps({"done": True})}

    return EventSourceResponse(event_generator(), sep="\n")
