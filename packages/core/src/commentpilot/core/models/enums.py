"""枚举定义 -- 审核事件状态、审核流程状态机、情感分类

包含 ModerationStatus（推送给订阅者的事件状态）、ModerationState 状态机、
Sentiment 情感分类，以及 VALID_TRANSITIONS 合法流转映射和 TERMINAL_STATES 终态集合。
"""

from enum import StrEnum


class ModerationStatus(StrEnum):
    """推送给订阅者的审核事件状态"""

    ANALYZING = "analyzing"
    DONE = "done"
    FAILED = "failed"


class ModerationState(StrEnum):
    """单条评论审核流程的状态机"""

    RECEIVED = "received"
    ANALYZING = "analyzing"

    # 分析结束后的分支
    STORED = "stored"
    STORE_FAILED = "store_failed"
    FAILED = "failed"

    # 终态
    RESPONDED = "responded"


VALID_TRANSITIONS: dict[ModerationState, set[ModerationState]] = {
    ModerationState.RECEIVED: {ModerationState.ANALYZING},
    ModerationState.ANALYZING: {
        ModerationState.STORED,
        ModerationState.STORE_FAILED,
        ModerationState.FAILED,
    },
    ModerationState.STORED: {ModerationState.RESPONDED},
    ModerationState.STORE_FAILED: {ModerationState.RESPONDED},
    ModerationState.FAILED: {ModerationState.RESPONDED},
    # 终态不可再流转
    ModerationState.RESPONDED: set(),
}

TERMINAL_STATES: set[ModerationState] = {ModerationState.RESPONDED}


class Sentiment(StrEnum):
    """评论情感分类"""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class InvalidStateTransition(Exception):
    """非法状态流转"""

    def __init__(self, from_state: ModerationState, to_state: ModerationState) -> None:
        super().__init__(f"非法状态流转: {from_state} -> {to_state}")
        self.from_state = from_state
        self.to_state = to_state


def validate_transition(from_state: ModerationState, to_state: ModerationState) -> bool:
    """验证状态流转是否合法

    Args:
        from_state: 当前状态
        to_state: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_state, set())
    return to_state in allowed
