"""DITA-OT MCP - 通过 MCP 运行 DITA Open Toolkit。

环境变量:
    DITA_HOME: DITA-OT 安装目录
    DITA_MCP_LOG_DEBUG: 日志输出到临时文件 (默认 false)

用法:
    uvx dita-ot-mcp
"""

__version__ = "0.1.0"

from .app import main
from .invoker import DitaInvoker, InvocationResult

__all__ = ["__version__", "main", "DitaInvoker", "InvocationResult"]
