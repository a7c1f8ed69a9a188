"""MCP 响应格式化器。

工具结果按值逐项输出为 TextContent；宿主层错误（未知工具、参数无效）
使用 XML-wrapped 格式，对 LLM 友好:
    <response>
      <error>...</error>
    </response>
"""

from __future__ import annotations

from collections.abc import Iterable

from mcp.types import TextContent

__all__ = [
    "ResponseFormatter",
    "get_formatter",
    "format_values",
    "format_error_response",
]


class ResponseFormatter:
    """MCP 响应格式化器。"""

    def format_values(self, values: Iterable[str]) -> list[TextContent]:
        """每个值对应一个 TextContent，保持顺序。"""
        return [TextContent(type="text", text=value) for value in values]

    def format_error(self, error: str) -> str:
        """格式化错误响应。"""
        return "\n".join([
            "<response>",
            f"  <error>{error}</error>",
            "</response>",
        ])


# 全局实例
_formatter: ResponseFormatter | None = None


def get_formatter() -> ResponseFormatter:
    """获取全局格式化器实例。"""
    global _formatter
    if _formatter is None:
        _formatter = ResponseFormatter()
    return _formatter


def format_values(values: Iterable[str]) -> list[TextContent]:
    return get_formatter().format_values(values)


def format_error_response(error: str) -> list[TextContent]:
    """统一的错误响应格式化函数。

    确保所有宿主层错误都以 <response><error>...</error></response> 格式返回。
    """
    return [TextContent(type="text", text=get_formatter().format_error(error))]
