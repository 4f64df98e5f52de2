"""配置常量模块 -- 可通过环境变量覆盖

包含运行环境、监听地址、存储回调地址、SSE 心跳与通道队列大小等可配置常量。
"""

import os

# 存储回调固定路径后缀（拼接在 storage base URL 之后）
STORAGE_PATH_SUFFIX = "/wp-json/ai-comments/v1/moderation"


def get_env() -> str:
    """获取运行环境名（development / production）"""
    return os.environ.get("COMMENTPILOT_ENV", "development")


def is_production() -> bool:
    """是否为生产环境"""
    return get_env() == "production"


def get_host() -> str:
    """获取监听地址"""
    return os.environ.get("COMMENTPILOT_HOST", "0.0.0.0")


def get_port() -> int:
    """获取监听端口"""
    return int(os.environ.get("COMMENTPILOT_PORT", "5001"))


def get_storage_base_url() -> str:
    """获取审核结果存储服务的基础 URL

    生产环境读取 COMMENTPILOT_STORAGE_URL_PROD，其余读取 COMMENTPILOT_STORAGE_URL_DEV。
    未配置时返回空字符串。
    """
    key = (
        "COMMENTPILOT_STORAGE_URL_PROD"
        if is_production()
        else "COMMENTPILOT_STORAGE_URL_DEV"
    )
    return os.environ.get(key, "").rstrip("/")


# 存储回调超时（秒）
STORAGE_TIMEOUT_S: float = float(
    os.environ.get("COMMENTPILOT_STORAGE_TIMEOUT_S", "10")
)

# SSE 心跳间隔（秒）
SSE_HEARTBEAT_INTERVAL: int = int(
    os.environ.get("COMMENTPILOT_SSE_HEARTBEAT_INTERVAL", "15")
)

# 每个订阅通道的队列容量
CHANNEL_QUEUE_MAXSIZE: int = int(
    os.environ.get("COMMENTPILOT_CHANNEL_QUEUE_MAXSIZE", "100")
)

# 日志中评论预览截断长度
COMMENT_PREVIEW_LENGTH: int = 80
