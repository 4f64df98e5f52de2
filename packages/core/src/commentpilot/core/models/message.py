"""CommentRequest Domain Model -- 评论审核/分析请求的统一格式"""

from pydantic import BaseModel, ConfigDict, Field


class ThreadEntry(BaseModel):
    """讨论串中的一条历史评论

    保留未声明的字段：缺少 text 的条目在 prompt 中按整条记录的 JSON 渲染，
    缺少 author 时显示为 "User"。
    """

    model_config = ConfigDict(extra="allow")

    author: str | None = Field(default=None, description="作者名")
    text: str | None = Field(default=None, description="评论内容")


class CommentRequest(BaseModel):
    """评论请求

    comment 可能缺失或为空，由审核服务作为前置条件检查（返回 4xx），
    而不是在模型层直接拒绝。
    """

    model_config = ConfigDict(populate_by_name=True)

    comment: str | None = Field(default=None, description="待审核的评论内容")
    thread: list[ThreadEntry] = Field(default_factory=list, description="所在讨论串")
    comment_id: str | None = Field(
        default=None, alias="commentId", description="评论 ID，仅作为 payload"
    )
    user_id: str | None = Field(
        default=None, alias="userId", description="订阅者标识，用于事件路由"
    )

    def has_comment(self) -> bool:
        """评论内容是否非空"""
        return bool(self.comment and self.comment.strip())
