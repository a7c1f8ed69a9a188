"""DITA-OT 调用器。

以同步方式运行 DITA-OT 命令行：
1. 检查 DITA_HOME 配置（缺失时立即失败，不创建子进程）
2. 构建参数向量: [可执行文件] + 参数（原样传递，不经过 shell）
3. 在 DITA_HOME 目录下启动子进程并阻塞等待结束
4. stdout 只写入日志；stderr 按行拆分作为返回值

启动失败（OSError，或参数含 NUL 字符时的 ValueError）不抛出，而是作为单个字符串结果返回。
"""

from __future__ import annotations

import io
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from .config import DITA_HOME, DitaConfig, get_dita_config
from .errors import DitaConfigError
from .runtime import ProcessRunner, ProcessSpec, decode_output

__all__ = [
    "DitaInvoker",
    "InvocationResult",
    "split_lines",
]

logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    """按换行符（LF、CR、CRLF）拆分文本，结尾换行不会产生空行。"""
    return [line.rstrip("\n") for line in io.StringIO(text, newline=None)]


@dataclass
class InvocationResult:
    """一次调用的结果。

    errors 和 spawn_error 互斥：启动失败时只有 spawn_error。

    Attributes:
        errors: stderr 中的错误行（按顺序）
        spawn_error: 启动子进程失败时的错误信息
        stdout: 捕获的 stdout（只用于日志，不属于返回值）
        returncode: 子进程退出码
        duration_sec: 调用耗时（秒）
    """

    errors: list[str] = field(default_factory=list)
    spawn_error: str | None = None
    stdout: str = ""
    returncode: int | None = None
    duration_sec: float = 0.0

    @property
    def failed_to_start(self) -> bool:
        return self.spawn_error is not None

    @property
    def values(self) -> list[str]:
        """返回给宿主的字符串序列。"""
        if self.spawn_error is not None:
            return [self.spawn_error]
        return list(self.errors)


class DitaInvoker:
    """DITA-OT 进程调用器。

    配置在构造时注入；未传入时使用全局缓存的 DITA_HOME 配置。
    实例无可变状态，可在多个线程中并发调用。

    Example:
        invoker = DitaInvoker(DitaConfig(home=Path("/opt/dita-ot")))
        errors = invoker.invoke(["--input=guide.ditamap", "--format=html5"])
    """

    def __init__(
        self,
        config: DitaConfig | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.config = config if config is not None else get_dita_config()
        self.runner = runner if runner is not None else ProcessRunner()

    def _require_configured(self) -> None:
        if not self.config.is_configured:
            error = DitaConfigError(DITA_HOME)
            logger.critical(str(error))
            raise error

    def build_command(self, args: Sequence[object]) -> list[str]:
        """构建参数向量。

        Args:
            args: 调用参数，每项通过 str() 转换

        Returns:
            [可执行文件路径, *args]

        Raises:
            DitaConfigError: 未配置 DITA_HOME
        """
        self._require_configured()
        return [str(self.config.executable), *(str(arg) for arg in args)]

    def execute(self, args: Sequence[object]) -> InvocationResult:
        """运行 DITA-OT 并返回完整结果。

        Raises:
            DitaConfigError: 未配置 DITA_HOME（不会创建子进程）
        """
        argv = self.build_command(args)
        logger.info(f"Running DITA OT with parameters: {argv[1:]}")

        spec = ProcessSpec(argv=argv, cwd=self.config.home)
        start = time.monotonic()
        try:
            output = self.runner.run(spec)
        except (OSError, ValueError) as e:
            # ValueError: 参数中含 NUL 字符
            logger.error("DITA OT process failed", exc_info=True)
            return InvocationResult(
                spawn_error=str(e),
                duration_sec=time.monotonic() - start,
            )

        stdout = decode_output(output.stdout)
        logger.debug(stdout)

        errors = split_lines(decode_output(output.stderr))
        for line in errors:
            logger.error(line)

        logger.info("Completed DITA OT processing")
        return InvocationResult(
            errors=errors,
            stdout=stdout,
            returncode=output.returncode,
            duration_sec=time.monotonic() - start,
        )

    def invoke(self, args: Sequence[object] = ()) -> list[str]:
        """运行 DITA-OT，返回 stderr 错误行或启动失败信息。

        Args:
            args: 调用参数（可为空）

        Returns:
            错误行列表（无错误时为空列表）；启动失败时为单个错误信息

        Raises:
            DitaConfigError: 未配置 DITA_HOME
        """
        return self.execute(args).values
