"""依赖注入模块 -- 通过 FastAPI Depends 注入服务实例

服务实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request

from .services.analysis_service import AnalysisService
from .services.channel_registry import ChannelRegistry
from .services.moderation_service import ModerationService


def get_channel_registry(request: Request) -> ChannelRegistry:
    """从 app.state 获取 ChannelRegistry 实例"""
    return request.app.state.channel_registry


def get_moderation_service(request: Request) -> ModerationService:
    """从 app.state 获取 ModerationService 实例"""
    return request.app.state.moderation_service


def get_analysis_service(request: Request) -> AnalysisService:
    """从 app.state 获取 AnalysisService 实例"""
    return request.app.state.analysis_service
