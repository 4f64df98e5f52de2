"""审核结论与评论分析的结构化输出模型

ModerationDecision 是审核任务的目标 schema，校验通过后才会写入外部存储。
CommentAnalysis 用于尽力而为的评论分析，失败时可回退到中性默认值。
"""

from typing import Any

from pydantic import BaseModel, Field

from .enums import Sentiment


class ModerationDecision(BaseModel):
    """评论审核结论"""

    approved: bool = Field(description="Whether the comment should be published")
    reason: str = Field(
        description="Short explanation; the rejection reason when not approved"
    )
    sentiment: Sentiment = Field(description="Overall sentiment of the comment")
    title: str = Field(description="A short title summarizing the comment")

    def to_storage_payload(self, comment_id: str) -> dict[str, Any]:
        """构建发送给存储服务的 JSON body"""
        return {
            "commentId": comment_id,
            "approved": self.approved,
            "reason": self.reason,
            "sentiment": self.sentiment.value,
            "title": self.title,
        }


class CommentAnalysis(BaseModel):
    """评论分析结果（情感、标题、建议回复）"""

    sentiment: Sentiment = Field(description="Overall sentiment of the comment")
    title: str = Field(description="A short title summarizing the comment")
    reply: str = Field(description="A friendly reply to post under the comment")

    @classmethod
    def neutral(cls) -> "CommentAnalysis":
        """中性默认值，仅供优先可用性的调用方使用"""
        return cls(
            sentiment=Sentiment.NEUTRAL,
            title="Untitled",
            reply="Thanks for your comment!",
        )
