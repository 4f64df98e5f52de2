"""TraceMiddleware -- 订阅者追踪

为订阅者事件流请求绑定 subscriber_id，使通道注册/注销日志可按订阅者关联。
subscriber_id 从 /api/v1/ai-comments/events/{user_id} 路径中提取。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class TraceMiddleware(BaseHTTPMiddleware):
    """订阅者追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        parts = request.url.path.rstrip("/").split("/")
        if len(parts) >= 2 and parts[-2] == "events" and parts[-1]:
            structlog.contextvars.bind_contextvars(subscriber_id=parts[-1])

        return await call_next(request)
