"""Synchronous process runner with subprocess isolation.

This module provides:
- Cross-platform subprocess isolation (new session/process group)
- Blocking run-to-completion with both output streams fully drained
- UTF-8 decoding of captured output

Key design points:
- POSIX: start_new_session=True to create new process group
- Windows: CREATE_NEW_PROCESS_GROUP for signal isolation
- stdin is DEVNULL, never inherited from the parent
- No timeout: the caller blocks until the child exits
"""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

__all__ = [
    "IS_WINDOWS",
    "ProcessOutput",
    "ProcessRunner",
    "ProcessSpec",
    "decode_output",
]

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = sys.platform == "win32"


@dataclass(frozen=True)
class ProcessSpec:
    """Specification for a subprocess to run.

    Attributes:
        argv: Command line arguments (first element is the executable)
        cwd: Working directory for the process
        env: Environment variables (None = inherit parent)
    """

    argv: list[str]
    cwd: Path
    env: Mapping[str, str] | None = None


@dataclass(frozen=True)
class ProcessOutput:
    """Captured result of a finished subprocess."""

    stdout: bytes
    stderr: bytes
    returncode: int


def decode_output(data: bytes) -> str:
    """Decode captured output as UTF-8, replacing undecodable bytes."""
    return data.decode("utf-8", errors="replace")


@dataclass
class ProcessRunner:
    """Cross-platform blocking process runner.

    Example:
        runner = ProcessRunner()
        spec = ProcessSpec(argv=["dita", "--version"], cwd=Path("/opt/dita-ot"))
        output = runner.run(spec)
        print(decode_output(output.stderr))
    """

    def run(self, spec: ProcessSpec) -> ProcessOutput:
        """Run subprocess to completion and collect both streams.

        Both pipes are drained together via communicate(), so a child that
        fills one pipe while the other is unread cannot deadlock.

        Args:
            spec: Process specification

        Returns:
            ProcessOutput with raw stdout/stderr bytes and the exit code

        Raises:
            OSError: If the process cannot be started or its pipes fail
        """
        kwargs = self._build_subprocess_kwargs(spec)

        # stdin=DEVNULL: the parent's stdin is the MCP JSON-RPC channel
        with subprocess.Popen(
            spec.argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=spec.cwd,
            **kwargs,
        ) as process:
            logger.debug(
                f"Started subprocess pid={process.pid} "
                f"argv={spec.argv[0]} cwd={spec.cwd}"
            )
            stdout, stderr = process.communicate()

        logger.debug(
            f"Subprocess completed pid={process.pid} "
            f"returncode={process.returncode}"
        )
        return ProcessOutput(
            stdout=stdout or b"",
            stderr=stderr or b"",
            returncode=process.returncode,
        )

    def _build_subprocess_kwargs(self, spec: ProcessSpec) -> dict[str, Any]:
        """Build platform-specific subprocess kwargs.

        Args:
            spec: Process specification

        Returns:
            Dict of kwargs for subprocess.Popen
        """
        kwargs: dict[str, Any] = {}

        if spec.env is not None:
            kwargs["env"] = dict(spec.env)

        if IS_WINDOWS:
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True

        return kwargs
