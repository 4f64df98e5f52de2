"""FastAPI 应用主文件

app 创建 + lifespan 管理：通道注册表、生成模型客户端、存储回调客户端、
审核/分析服务的初始化与关闭 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
from commentpilot.core.config import STORAGE_TIMEOUT_S, get_env, get_storage_base_url
from commentpilot.provider import (
    LiteLLMClient,
    ProviderConfig,
    StructuredTaskExecutor,
    load_provider_config,
)
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import comments, health, stream
from .services.analysis_service import AnalysisService
from .services.channel_registry import ChannelRegistry
from .services.moderation_service import ModerationService
from .services.storage_client import ModerationStorageClient

log = structlog.get_logger()


def init_app_state(
    app: FastAPI,
    provider_config: ProviderConfig,
    http_client: httpx.AsyncClient,
    storage_base_url: str,
    llm_client: LiteLLMClient | None = None,
) -> None:
    """组装服务实例并挂到 app.state

    测试可直接调用本函数注入替身（如 Mock LLM 客户端、MockTransport），绕过 lifespan。
    """
    if llm_client is None:
        llm_client = LiteLLMClient(
            base_url=provider_config.base_url,
            api_key=provider_config.api_key.get_secret_value(),
            provider=provider_config.provider,
            timeout_s=provider_config.timeout_s,
        )

    registry = ChannelRegistry()
    executor = StructuredTaskExecutor(llm_client, provider_config)
    storage_client = ModerationStorageClient(
        base_url=storage_base_url,
        http_client=http_client,
        timeout_s=STORAGE_TIMEOUT_S,
    )

    app.state.provider_config = provider_config
    app.state.http_client = http_client
    app.state.llm_client = llm_client
    app.state.channel_registry = registry
    app.state.storage_client = storage_client
    app.state.moderation_service = ModerationService(
        executor=executor,
        registry=registry,
        storage=storage_client,
    )
    app.state.analysis_service = AnalysisService(executor=executor)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """请求体校验失败统一返回 400 {error: <message>}"""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body') or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    log.warning("request_validation_failed", path=request.url.path, errors=problems)
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request body: {problems}"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时组装服务，关闭时清理通道与 HTTP 连接"""
    provider_config = load_provider_config()
    storage_base_url = get_storage_base_url()
    http_client = httpx.AsyncClient()

    init_app_state(app, provider_config, http_client, storage_base_url)

    log.info(
        "services_initialized",
        env=get_env(),
        llm_base_url=provider_config.base_url,
        llm_model=provider_config.model,
        max_retries=provider_config.max_retries,
        storage_configured=bool(storage_base_url),
    )

    yield

    await app.state.channel_registry.clear()
    await http_client.aclose()
    log.info("services_closed")


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="CommentPilot Gateway",
        version="0.1.0",
        description="评论 AI 审核服务 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # 注册路由
    app.include_router(comments.router, tags=["comments"])
    app.include_router(stream.router, tags=["stream"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
