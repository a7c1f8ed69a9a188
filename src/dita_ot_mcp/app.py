"""DITA-OT MCP 应用入口。

包含日志配置、服务器生命周期管理和主入口点。
"""

from __future__ import annotations

import asyncio
import logging
import sys

from mcp.server.stdio import stdio_server

from .config import Config, get_config, get_dita_config
from .invoker import DitaInvoker
from .server import create_server

__all__ = ["configure_logging", "run_server", "main"]

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


async def run_server() -> None:
    """运行 MCP Server（stdio 传输）。"""
    config = get_config()
    dita_config = get_dita_config()
    logger.info(f"Starting DITA-OT MCP Server: {config}")

    if dita_config.is_configured:
        logger.info(f"DITA-OT executable: {dita_config.executable}")
    else:
        # 服务器仍然启动，每次调用时报错
        logger.warning("DITA_HOME is not set, run_dita_ot calls will fail")

    server = create_server(DitaInvoker(dita_config))

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    except asyncio.CancelledError:
        logger.info("run_server: cancelled")
        raise
    finally:
        logger.info("run_server: stopped")


def configure_logging(config: Config) -> list[logging.Handler]:
    """配置日志输出。

    - LOG_DEBUG 模式：输出到临时文件，DEBUG 级别
    - 默认模式：输出到 stderr（stdout 是 MCP 通道）
    """
    log_handlers: list[logging.Handler] = []

    if config.log_debug and config.log_file:
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log_handlers.append(file_handler)
        log_level = logging.DEBUG
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log_handlers.append(stderr_handler)
        log_level = config.log_level

    # root logger（第三方库）为 WARNING，减少噪音
    logging.basicConfig(
        level=logging.WARNING,
        handlers=log_handlers,
        force=True,
    )
    # 只对 dita_ot_mcp 命名空间启用详细日志
    logging.getLogger("dita_ot_mcp").setLevel(log_level)
    return log_handlers


def main() -> None:
    """主入口点。"""
    configure_logging(get_config())
    try:
        asyncio.run(run_server())
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
        sys.exit(130)


if __name__ == "__main__":
    main()
