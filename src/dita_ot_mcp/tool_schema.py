"""Tool Schema 定义。

包含工具描述、参数 schema 和参数校验模型。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "TOOL_NAME",
    "TOOL_DESCRIPTION",
    "RunDitaOTArguments",
    "create_tool_schema",
]

TOOL_NAME = "run_dita_ot"

TOOL_DESCRIPTION = """Run DITA Open Toolkit processing.

Invokes $DITA_HOME/bin/dita with the given parameters, in order, as separate
command-line arguments (no shell, no quoting).

PARAMETERS:
- Each item is one argument, e.g. "--input=guide.ditamap", "--format=html5"
  or "--args.css=custom.css".
- Reference: https://www.dita-ot.org/3.6/parameters/parameters_intro.html

RETURNS:
- One text item per line DITA-OT wrote to stderr (its error messages).
- No items when DITA-OT reported no errors.
- A single text item with the OS error message if the process could not start."""


class RunDitaOTArguments(BaseModel):
    """run_dita_ot 工具参数。

    Attributes:
        parameters: DITA-OT 命令行参数，顺序有效，允许重复
    """

    model_config = ConfigDict(extra="ignore")

    parameters: list[str] = Field(default_factory=list)

    @field_validator("parameters", mode="before")
    @classmethod
    def _coerce_parameters(cls, value: Any) -> list[str]:
        """单个值视为一项序列，标量统一转为字符串。"""
        if value is None:
            return []
        if isinstance(value, (str, int, float, bool)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("parameters must be a string or a list of strings")
        items: list[str] = []
        for item in value:
            if item is None or isinstance(item, (dict, list, tuple)):
                raise ValueError(f"parameter must be a scalar value, got {type(item).__name__}")
            items.append(str(item))
        return items


def create_tool_schema() -> dict[str, Any]:
    """创建 run_dita_ot 工具的 JSON schema。"""
    return {
        "type": "object",
        "properties": {
            "parameters": {
                "type": "array",
                "items": {"type": "string"},
                "default": [],
                "description": (
                    "DITA-OT parameters passed verbatim as separate arguments, "
                    "e.g. [\"--input=guide.ditamap\", \"--format=html5\"]."
                ),
            },
        },
        "required": [],
    }
