"""DITA-OT 模块异常类。"""

from __future__ import annotations

__all__ = [
    "DitaError",
    "DitaConfigError",
]


class DitaError(Exception):
    """DITA-OT 模块基础异常。"""
    pass


class DitaConfigError(DitaError):
    """配置错误（如缺少 DITA_HOME）。

    Attributes:
        variable: 缺失的环境变量名
    """

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"{variable} environmental variable is not found")
