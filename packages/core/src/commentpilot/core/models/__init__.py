"""CommentPilot Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .decision import CommentAnalysis, ModerationDecision
from .enums import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    InvalidStateTransition,
    ModerationState,
    ModerationStatus,
    Sentiment,
    validate_transition,
)
from .event import ModerationEvent
from .message import CommentRequest, ThreadEntry

__all__ = [
    # 枚举
    "ModerationStatus",
    "ModerationState",
    "Sentiment",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "InvalidStateTransition",
    "validate_transition",
    # Event
    "ModerationEvent",
    # 结构化输出
    "ModerationDecision",
    "CommentAnalysis",
    # Message
    "CommentRequest",
    "ThreadEntry",
]
