"""Prompt 输入值 -- 有限的几种带标签输入变体

每个变体有唯一的渲染规则：
- ScalarInput: 原样透传
- RecordListInput: 记录序列（如讨论串），渲染为编号的逐行文本
- StructuredInput: 其他对象/数组，渲染为缩进 JSON
"""

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel


@dataclass(frozen=True)
class ScalarInput:
    value: str | int | float | bool | None

    def render(self) -> str:
        if self.value is None:
            return ""
        return str(self.value)


@dataclass(frozen=True)
class RecordListInput:
    """记录序列，每条记录渲染为 `{序号}. {author}: {text}`

    author 为 None 时使用 "User"；text 为 None 时输出整条记录的紧凑 JSON。
    """

    records: tuple[Mapping[str, Any], ...]

    def render(self) -> str:
        lines = []
        for i, record in enumerate(self.records, start=1):
            author = record.get("author")
            if author is None:
                author = "User"
            text = record.get("text")
            if text is None:
                text = json.dumps(
                    dict(record), ensure_ascii=False, separators=(",", ":"), default=str
                )
            lines.append(f"{i}. {author}: {text}")
        return "\n".join(lines)


@dataclass(frozen=True)
class StructuredInput:
    value: Any

    def render(self) -> str:
        return json.dumps(self.value, indent=2, ensure_ascii=False, default=str)


InputValue = ScalarInput | RecordListInput | StructuredInput


def _to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    return value


def as_input_value(value: Any) -> InputValue:
    """将原始值归入对应的输入变体（已是变体时原样返回）"""
    if isinstance(value, ScalarInput | RecordListInput | StructuredInput):
        return value

    value = _to_plain(value)

    if isinstance(value, str | int | float | bool) or value is None:
        return ScalarInput(value)

    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        items = [_to_plain(v) for v in value]
        # 空序列按记录序列处理，渲染为空文本
        if all(isinstance(v, Mapping) for v in items):
            return RecordListInput(tuple(items))
        return StructuredInput(items)

    return StructuredInput(value)


def render_inputs(input_data: Mapping[str, Any]) -> dict[str, str]:
    """渲染全部输入值为文本"""
    return {name: as_input_value(value).render() for name, value in input_data.items()}
