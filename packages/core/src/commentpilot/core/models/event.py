"""ModerationEvent -- 推送给前端订阅者的审核事件

事件不落库，仅作为在途消息存在。
线上格式使用 camelCase 键名，未设置的可选字段不输出。
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import ModerationStatus


class ModerationEvent(BaseModel):
    """审核事件 -- status + 关联数据"""

    model_config = ConfigDict(populate_by_name=True)

    status: ModerationStatus = Field(description="事件状态")
    comment_id: str | None = Field(
        default=None,
        alias="commentId",
        description="关联的评论 ID（仅作为 payload，不参与路由）",
    )
    error: str | None = Field(default=None, description="失败原因")
    ts: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="事件时间戳",
    )

    def to_wire(self) -> dict[str, Any]:
        """转换为可 JSON 序列化的推送数据"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
