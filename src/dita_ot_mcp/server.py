"""DITA-OT MCP Server。

提供 run_dita_ot 工具，运行 DITA Open Toolkit 并返回其错误输出。

环境变量:
    DITA_HOME: DITA-OT 安装目录
    DITA_MCP_LOG_DEBUG: 日志输出到临时文件 (默认 false)
    DITA_MCP_LOG_LEVEL: stderr 日志级别 (默认 INFO)

用法:
    uvx dita-ot-mcp
"""

from __future__ import annotations

import logging
from typing import Any

import anyio
from mcp.server import Server
from mcp.types import TextContent, Tool
from pydantic import ValidationError

from .errors import DitaConfigError
from .invoker import DitaInvoker
from .response_formatter import format_error_response, format_values
from .tool_schema import (
    TOOL_DESCRIPTION,
    TOOL_NAME,
    RunDitaOTArguments,
    create_tool_schema,
)

__all__ = ["create_server", "handle_tool_call"]

logger = logging.getLogger(__name__)


async def handle_tool_call(
    name: str,
    arguments: dict[str, Any] | None,
    invoker: DitaInvoker,
) -> list[TextContent]:
    """处理一次工具调用。

    Raises:
        DitaConfigError: 未配置 DITA_HOME，由宿主作为调用失败上报
    """
    if name != TOOL_NAME:
        return format_error_response(f"Unknown tool '{name}'")

    try:
        args = RunDitaOTArguments.model_validate(arguments or {})
    except ValidationError as e:
        return format_error_response(f"Invalid arguments: {e}")

    # 阻塞调用放到工作线程，避免阻塞事件循环
    values = await anyio.to_thread.run_sync(invoker.invoke, args.parameters)
    return format_values(values)


def create_server(invoker: DitaInvoker | None = None) -> Server:
    """创建 MCP Server 实例。

    Args:
        invoker: DITA-OT 调用器（可选，默认使用环境变量配置）
    """
    invoker = invoker if invoker is not None else DitaInvoker()
    server = Server("dita-ot-mcp")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """列出可用工具。"""
        return [
            Tool(
                name=TOOL_NAME,
                description=TOOL_DESCRIPTION,
                inputSchema=create_tool_schema(),
            )
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """调用工具。"""
        logger.debug(f"[MCP] call_tool request: name={name}, arguments={arguments}")

        try:
            return await handle_tool_call(name, arguments, invoker)

        except DitaConfigError:
            # 配置错误必须中止调用，交给 SDK 转换为 isError 结果
            raise

        except Exception as e:
            logger.error(f"Tool '{name}' failed: type={type(e).__name__}, msg={e}")
            return format_error_response(str(e))

    return server
