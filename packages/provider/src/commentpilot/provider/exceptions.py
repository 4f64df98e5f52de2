"""Provider 异常体系

生成调用失败、输出解析失败、schema 校验失败均为可重试错误；
StructuredTaskError 表示重试预算耗尽后的终态失败。
"""


class ProviderError(Exception):
    """Provider 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重试恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class ProviderUnreachableError(ProviderError):
    """推理服务不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, base_url: str, original_error: Exception) -> None:
        """
        Args:
            base_url: 尝试连接的推理服务地址
            original_error: 原始异常
        """
        super().__init__(
            f"推理服务不可达: {base_url} -- {original_error}",
            recoverable=True,
        )
        self.base_url = base_url
        self.original_error = original_error


class OutputParseError(ProviderError):
    """模型输出无法解析为 JSON 对象"""


class SchemaValidationError(ProviderError):
    """模型输出是合法 JSON，但不符合目标 schema"""


class StructuredTaskError(ProviderError):
    """结构化任务在所有尝试后仍失败（终态，不自动重试）"""

    def __init__(self, attempts: int, last_error: Exception | None) -> None:
        super().__init__(
            f"Failed after {attempts} retries. Last error: {last_error}",
            recoverable=False,
        )
        self.attempts = attempts
        self.last_error = last_error
