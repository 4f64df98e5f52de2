"""structlog 配置模块

COMMENTPILOT_LOG_FORMAT=dev（默认）输出彩色可读日志，json 输出单行 JSON，
便于按 request_id / subscriber_id / comment_id 检索一次审核的完整链路。
uvicorn、httpx、LiteLLM 等标准库 logging 日志经 ProcessorFormatter 走同一渲染器。
"""

import logging
import os

import structlog
from fastapi import FastAPI

# 第三方库日志级别下限：LiteLLM 每次调用都会输出大段调试信息，
# httpx 每次存储回调都会记录一行 INFO
_NOISY_LOGGERS: dict[str, int] = {
    "LiteLLM": logging.WARNING,
    "LiteLLM Router": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging() -> None:
    """初始化 structlog 与标准库 logging

    COMMENTPILOT_LOG_LEVEL 控制根日志级别（默认 INFO），
    第三方库级别不低于 _NOISY_LOGGERS 中的下限。
    """
    log_format = os.environ.get("COMMENTPILOT_LOG_FORMAT", "dev").lower()
    level_name = os.environ.get("COMMENTPILOT_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelNamesMapping().get(level_name, logging.INFO)

    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(log_format),
            foreign_pre_chain=shared,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name, floor in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, floor))


def setup_logfire(app: FastAPI) -> None:
    """可选启用 Logfire APM（LOGFIRE_SEND_TO_LOGFIRE=true，需安装 logfire extra）

    同时追踪 FastAPI 请求与 httpx 出站调用（存储回调）。
    初始化失败只记录警告，服务照常启动。
    """
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return
    try:
        import logfire

        logfire.configure(service_name="commentpilot-gateway")
        logfire.instrument_fastapi(app)
        logfire.instrument_httpx()
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
