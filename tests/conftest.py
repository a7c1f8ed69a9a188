"""Pytest 配置和 fixtures。"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent

# 添加 src 目录到 Python 路径
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

FAKE_DITA = Path(__file__).parent / "fixtures" / "fake_dita.py"

IS_WINDOWS = sys.platform == "win32"


def _write_stub(bin_dir: Path) -> Path:
    """在 bin 目录下生成调用 fake_dita.py 的 dita 启动脚本。"""
    bin_dir.mkdir(parents=True, exist_ok=True)
    if IS_WINDOWS:
        stub = bin_dir / "dita.bat"
        stub.write_text(
            f'@echo off\r\n"{sys.executable}" "{FAKE_DITA}" %*\r\n',
            encoding="utf-8",
        )
    else:
        stub = bin_dir / "dita"
        stub.write_text(
            f'#!/bin/sh\nexec "{sys.executable}" "{FAKE_DITA}" "$@"\n',
            encoding="utf-8",
        )
        stub.chmod(0o755)
    return stub


@pytest.fixture
def dita_home(tmp_path: Path) -> Path:
    """带 fake dita 可执行文件的 DITA_HOME 目录。"""
    home = tmp_path / "dita-ot"
    _write_stub(home / "bin")
    return home


@pytest.fixture
def read_calls():
    """读取 fake dita 记录的调用。"""

    def _read(home: Path) -> list[dict]:
        calls_file = home / "calls.jsonl"
        if not calls_file.exists():
            return []
        with open(calls_file, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    return _read


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """移除 DITA_* 环境变量。"""
    for key in list(os.environ):
        if key == "DITA_HOME" or key.startswith("DITA_MCP_"):
            monkeypatch.delenv(key, raising=False)
