"""审核状态机流转单元测试

测试内容：
1. 合法流转通过
2. 非法流转被拒绝
3. 终态不可再流转
"""

import pytest
from commentpilot.core.models.enums import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ModerationState,
    validate_transition,
)


class TestModerationStateTransitions:
    """状态机流转验证"""

    @pytest.mark.parametrize(
        "from_state,to_state",
        [
            (ModerationState.RECEIVED, ModerationState.ANALYZING),
            (ModerationState.ANALYZING, ModerationState.STORED),
            (ModerationState.ANALYZING, ModerationState.STORE_FAILED),
            (ModerationState.ANALYZING, ModerationState.FAILED),
            (ModerationState.STORED, ModerationState.RESPONDED),
            (ModerationState.STORE_FAILED, ModerationState.RESPONDED),
            (ModerationState.FAILED, ModerationState.RESPONDED),
        ],
    )
    def test_valid_transition(self, from_state, to_state):
        """合法流转应通过验证"""
        assert validate_transition(from_state, to_state) is True

    @pytest.mark.parametrize(
        "from_state,to_state",
        [
            (ModerationState.RECEIVED, ModerationState.STORED),
            (ModerationState.RECEIVED, ModerationState.RESPONDED),
            (ModerationState.ANALYZING, ModerationState.RESPONDED),
            (ModerationState.STORED, ModerationState.STORE_FAILED),
            (ModerationState.STORED, ModerationState.FAILED),
        ],
    )
    def test_invalid_transition(self, from_state, to_state):
        """非法流转应被拒绝（如 stored 之后不能再 failed）"""
        assert validate_transition(from_state, to_state) is False

    def test_terminal_state_has_no_outgoing(self):
        """终态不可再流转"""
        for state in TERMINAL_STATES:
            assert VALID_TRANSITIONS[state] == set()

    def test_every_state_has_transition_entry(self):
        """所有状态都在流转表中"""
        assert set(VALID_TRANSITIONS) == set(ModerationState)
