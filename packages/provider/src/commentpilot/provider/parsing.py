"""模型输出解析与校验

1. strip_code_fences: 去掉 Markdown 代码块标记
2. parse_json_object: 先严格解析；失败时提取最外层 {...} 片段再解析
3. parse_structured_output: 解析后按 pydantic schema 严格校验字段、类型与枚举值

解析失败（OutputParseError）与校验失败（SchemaValidationError）都是可重试错误。
"""

import json
import re
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from .exceptions import OutputParseError, SchemaValidationError

log = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

_CODE_FENCE_RE = re.compile(r"```json|```")
_OBJECT_SPAN_RE = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(text: str) -> str:
    """去掉 ```json / ``` 标记及首尾空白"""
    return _CODE_FENCE_RE.sub("", text).strip()


def parse_json_object(text: str) -> dict[str, Any]:
    """将文本解析为单个 JSON 对象

    Raises:
        OutputParseError: 严格解析和片段提取均失败，或结果不是 JSON 对象
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        match = _OBJECT_SPAN_RE.search(text)
        if match is None:
            raise OutputParseError(f"No JSON object found in model output: {exc}") from exc
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as span_exc:
            raise OutputParseError(
                f"Could not parse JSON object from model output: {span_exc}"
            ) from span_exc
        log.debug("json_recovered_from_span", span_chars=len(match.group(0)))

    if not isinstance(data, dict):
        raise OutputParseError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data


def parse_structured_output(text: str, schema: type[T]) -> T:
    """解析并校验模型输出

    Args:
        text: 已去除代码块标记的模型输出
        schema: 目标 pydantic 模型

    Returns:
        schema 实例

    Raises:
        OutputParseError: 文本无法解析为 JSON 对象
        SchemaValidationError: JSON 对象不符合 schema
    """
    data = parse_json_object(text)
    # 严格模式：不做类型转换（"yes" / 0 不会被当作布尔值），枚举仍按字符串值匹配
    try:
        return schema.model_validate_json(json.dumps(data), strict=True)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise SchemaValidationError(
            f"Output does not match {schema.__name__}: {problems}"
        ) from exc
