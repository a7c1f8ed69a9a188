"""Runtime module for subprocess management.

This module provides isolated, blocking process execution for the
DITA-OT command line.
"""

from __future__ import annotations

from .process_runner import ProcessOutput, ProcessRunner, ProcessSpec, decode_output

__all__ = [
    "ProcessOutput",
    "ProcessRunner",
    "ProcessSpec",
    "decode_output",
]
