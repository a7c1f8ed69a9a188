"""DITA-OT MCP 环境变量配置管理。

环境变量:
    DITA_HOME: DITA Open Toolkit 安装目录
        - 必需（调用时检查），未设置或为空时每次调用都会失败
        - 可执行文件: $DITA_HOME/bin/dita（Windows 下为 dita.bat）
        - 子进程的工作目录也是 DITA_HOME

    DITA_MCP_LOG_DEBUG: 日志调试模式
        - true/1/yes/on = 开启 (日志输出到临时文件，DEBUG 级别)
        - false/0/no = 关闭 (默认，日志输出到 stderr)

    DITA_MCP_LOG_LEVEL: stderr 日志级别
        - DEBUG/INFO/WARNING/ERROR/CRITICAL，默认 INFO
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .runtime.process_runner import IS_WINDOWS

__all__ = [
    "DITA_HOME",
    "Config",
    "DitaConfig",
    "load_config",
    "load_dita_config",
    "get_config",
    "get_dita_config",
    "reload_config",
]

# DITA-OT 安装目录环境变量
DITA_HOME = "DITA_HOME"


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """解析布尔值环境变量。"""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_log_level(value: str | None) -> int:
    """解析日志级别，无效值返回 INFO。"""
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


@dataclass(frozen=True)
class DitaConfig:
    """DITA-OT 安装配置。

    启动时解析一次，之后不可变。通过构造参数注入 DitaInvoker，
    测试时可以直接传入临时路径而无需修改进程环境变量。

    Attributes:
        home: DITA-OT 安装目录，None 表示未配置
        windows: 是否按 Windows 规则推导可执行文件名
    """

    home: Path | None
    windows: bool = IS_WINDOWS

    def __post_init__(self) -> None:
        if isinstance(self.home, str):
            object.__setattr__(self, "home", Path(self.home))

    @property
    def is_configured(self) -> bool:
        """检查是否已配置 DITA_HOME。"""
        return self.home is not None

    @property
    def executable(self) -> Path | None:
        """DITA-OT 可执行文件路径: home/bin/dita[.bat]。"""
        if self.home is None:
            return None
        return self.home / "bin" / ("dita.bat" if self.windows else "dita")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "DitaConfig":
        """从环境变量解析配置。空字符串视为未设置。"""
        env = os.environ if environ is None else environ
        value = env.get(DITA_HOME)
        if not value or not value.strip():
            return cls(home=None)
        return cls(home=Path(value))


@dataclass
class Config:
    """服务器配置。

    Attributes:
        log_debug: 日志调试模式（输出到临时文件）
        log_file: 日志文件路径（当 log_debug=True 时自动设置）
        log_level: stderr 日志级别
    """

    log_debug: bool = False
    log_file: str | None = None
    log_level: int = logging.INFO

    def __repr__(self) -> str:
        return (
            f"Config(log_debug={self.log_debug}, "
            f"log_file={self.log_file}, "
            f"log_level={logging.getLevelName(self.log_level)})"
        )


def _generate_log_file_path() -> str:
    """生成日志文件路径。

    Returns:
        临时目录下的日志文件绝对路径
    """
    log_dir = Path(tempfile.gettempdir()) / "dita-ot-mcp"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"dita_mcp_debug_{timestamp}.log"

    return str(log_file.resolve())


def load_config() -> Config:
    """从环境变量加载服务器配置。"""
    log_debug = _parse_bool(os.environ.get("DITA_MCP_LOG_DEBUG"), default=False)
    log_file = _generate_log_file_path() if log_debug else None

    return Config(
        log_debug=log_debug,
        log_file=log_file,
        log_level=_parse_log_level(os.environ.get("DITA_MCP_LOG_LEVEL")),
    )


def load_dita_config() -> DitaConfig:
    """从环境变量加载 DITA-OT 配置。"""
    return DitaConfig.from_env()


# 全局配置实例（延迟加载）
_config: Config | None = None
_dita_config: DitaConfig | None = None


def get_config() -> Config:
    """获取全局服务器配置实例。"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_dita_config() -> DitaConfig:
    """获取全局 DITA-OT 配置实例。"""
    global _dita_config
    if _dita_config is None:
        _dita_config = load_dita_config()
    return _dita_config


def reload_config() -> Config:
    """重新加载全部配置（用于测试）。"""
    global _config, _dita_config
    _config = load_config()
    _dita_config = load_dita_config()
    return _config
