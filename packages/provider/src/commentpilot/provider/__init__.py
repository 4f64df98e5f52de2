"""CommentPilot Provider -- 生成模型调用与结构化输出层

packages/provider 的公开接口导出。
"""

# 核心组件
from .client import LiteLLMClient

# 配置
from .config import ProviderConfig, load_provider_config

# 异常
from .exceptions import (
    OutputParseError,
    ProviderError,
    ProviderUnreachableError,
    SchemaValidationError,
    StructuredTaskError,
)

# 输入渲染
from .inputs import (
    InputValue,
    RecordListInput,
    ScalarInput,
    StructuredInput,
    as_input_value,
    render_inputs,
)

# 数据模型
from .models import ModelCallResult, ModelOptions, TokenUsage
from .parsing import parse_json_object, parse_structured_output, strip_code_fences
from .structured import StructuredTaskExecutor

__all__ = [
    "ModelCallResult",
    "ModelOptions",
    "TokenUsage",
    "LiteLLMClient",
    "StructuredTaskExecutor",
    "ProviderConfig",
    "load_provider_config",
    "InputValue",
    "ScalarInput",
    "RecordListInput",
    "StructuredInput",
    "as_input_value",
    "render_inputs",
    "parse_json_object",
    "parse_structured_output",
    "strip_code_fences",
    "ProviderError",
    "ProviderUnreachableError",
    "OutputParseError",
    "SchemaValidationError",
    "StructuredTaskError",
]
