"""Prompt 渲染 -- 命名占位符替换 + 结构化输出指令"""

import json
import re
from collections.abc import Mapping

from pydantic import BaseModel

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

# 追加到任务 prompt 之后的固定指令块
STRUCTURED_OUTPUT_INSTRUCTIONS = """

Respond ONLY with a valid JSON object matching the format:

{format_instructions}

If previous attempt failed, you may also receive an "error" message explaining what went wrong.
Use that info to fix the formatting or fill missing fields.

{error}
"""


def render_template(template: str, values: Mapping[str, str]) -> str:
    """替换 {name} 占位符

    只替换 values 中存在的名字，其余花括号原样保留；替换结果不会被再次扫描。
    """

    def _sub(match: re.Match) -> str:
        name = match.group(1)
        if name in values:
            return values[name]
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_sub, template)


def format_instructions(schema: type[BaseModel]) -> str:
    """根据 pydantic 模型生成 JSON 输出格式说明"""
    json_schema = schema.model_json_schema()
    json_schema.pop("title", None)
    for prop in json_schema.get("properties", {}).values():
        prop.pop("title", None)
    rendered = json.dumps(json_schema, indent=2, ensure_ascii=False)
    return (
        'The output must be a JSON object that conforms to the JSON Schema below. '
        'Use exactly these property names, include every required property, '
        "and use only the listed enum values.\n\n"
        f"```json\n{rendered}\n```"
    )
