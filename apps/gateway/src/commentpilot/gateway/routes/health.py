"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含通道注册表与存储回调配置；
         profile=llm 时额外探测推理服务。
"""

import structlog
from fastapi import APIRouter, Query, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(
    request: Request,
    profile: str | None = Query(
        default=None,
        description="检查配置：core（默认）仅核心检查；llm/full 包含推理服务健康检查",
    ),
):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. channel_registry: 注册表已初始化，附带当前订阅者数量
    2. storage: 存储回调地址是否已配置（未配置不算失败，但会标记）
    3. llm: 根据 profile 决定是否探测推理服务
    """
    effective_profile = profile or "core"

    checks: dict = {}
    all_ok = True

    # 1. 通道注册表
    registry = getattr(request.app.state, "channel_registry", None)
    if registry is not None:
        checks["channel_registry"] = "ok"
        checks["subscribers"] = len(registry)
    else:
        checks["channel_registry"] = "error: not initialized"
        all_ok = False

    # 2. 存储回调配置
    storage_client = getattr(request.app.state, "storage_client", None)
    if storage_client is None:
        checks["storage"] = "error: not initialized"
        all_ok = False
    elif storage_client.configured:
        checks["storage"] = "configured"
    else:
        checks["storage"] = "not_configured"

    # 3. 推理服务健康检查
    if effective_profile in ("llm", "full"):
        llm_client = getattr(request.app.state, "llm_client", None)
        if llm_client is None:
            checks["llm"] = "error: not initialized"
            all_ok = False
        else:
            try:
                healthy = await llm_client.health_check()
            except Exception as e:
                log.warning("health_check_error", error=str(e))
                healthy = False
            checks["llm"] = "ok" if healthy else "unreachable"
            all_ok = all_ok and healthy
    else:
        checks["llm"] = "skipped"

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "profile": effective_profile,
            "checks": checks,
        },
    )
