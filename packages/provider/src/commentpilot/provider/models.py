"""数据模型 -- TokenUsage + ModelCallResult + ModelOptions"""

from pydantic import BaseModel, Field


class TokenUsage(BaseModel):
    """Token 使用统计

    key 命名对齐 OpenAI/LiteLLM 行业标准：
    prompt_tokens / completion_tokens / total_tokens
    """

    prompt_tokens: int = Field(default=0, ge=0, description="输入 token 数")
    completion_tokens: int = Field(default=0, ge=0, description="输出 token 数")
    total_tokens: int = Field(default=0, ge=0, description="总 token 数")


class ModelCallResult(BaseModel):
    """单次生成调用结果"""

    content: str = Field(description="模型响应文本内容")
    model_name: str = Field(default="", description="实际调用的模型名称")
    duration_ms: int = Field(ge=0, description="端到端耗时（毫秒）")
    token_usage: TokenUsage = Field(
        default_factory=TokenUsage,
        description="Token 使用详情",
    )


class ModelOptions(BaseModel):
    """单个任务的模型参数

    字段为 None 时由 ProviderConfig 中的默认值补齐，在任务开始前一次性解析，
    重试循环中不再改变。
    """

    model: str | None = Field(default=None, description="模型名")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0, description="采样温度")
    base_url: str | None = Field(default=None, description="推理服务地址")
    max_retries: int | None = Field(default=None, ge=1, description="最大尝试次数")
    call_retries: int | None = Field(default=None, ge=0, description="传输层重试提示")
