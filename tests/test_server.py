"""Server 模块测试。

测试 run_dita_ot 工具的注册和调用。
"""

from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest
from mcp import types

from dita_ot_mcp.config import DitaConfig
from dita_ot_mcp.errors import DitaConfigError
from dita_ot_mcp.invoker import DitaInvoker
from dita_ot_mcp.runtime import ProcessRunner
from dita_ot_mcp.server import create_server, handle_tool_call
from dita_ot_mcp.tool_schema import TOOL_NAME


@pytest.fixture
def invoker(dita_home: Path) -> DitaInvoker:
    return DitaInvoker(DitaConfig(home=dita_home))


def texts(contents: list) -> list[str]:
    return [c.text for c in contents]


async def call_via_server(server, name: str, arguments: dict) -> types.CallToolResult:
    """通过 MCP 请求处理器调用工具。"""
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    result = await handler(request)
    return result.root


class TestHandleToolCall:
    """测试工具调用处理。"""

    @pytest.mark.asyncio
    async def test_error_lines_as_text_items(self, invoker: DitaInvoker, dita_home: Path):
        (dita_home / "stderr.txt").write_text("ERROR: file not found\nWARN: deprecated option\n")
        result = await handle_tool_call(
            TOOL_NAME,
            {"parameters": ["/ditamap=foo.ditamap", "/transtype=html5"]},
            invoker,
        )
        assert texts(result) == ["ERROR: file not found", "WARN: deprecated option"]
        assert all(c.type == "text" for c in result)

    @pytest.mark.asyncio
    async def test_no_errors_empty_result(self, invoker: DitaInvoker):
        assert await handle_tool_call(TOOL_NAME, {"parameters": []}, invoker) == []

    @pytest.mark.asyncio
    async def test_missing_arguments(self, invoker: DitaInvoker, dita_home: Path, read_calls):
        assert await handle_tool_call(TOOL_NAME, None, invoker) == []
        assert read_calls(dita_home)[0]["argv"] == []

    @pytest.mark.asyncio
    async def test_parameters_forwarded_in_order(
        self, invoker: DitaInvoker, dita_home: Path, read_calls
    ):
        await handle_tool_call(TOOL_NAME, {"parameters": ["b", "a", "b"]}, invoker)
        assert read_calls(dita_home)[0]["argv"] == ["b", "a", "b"]

    @pytest.mark.asyncio
    async def test_spawn_failure_single_text(self, tmp_path: Path):
        runner = mock.Mock(spec=ProcessRunner)
        runner.run.side_effect = FileNotFoundError(2, "No such file or directory")
        invoker = DitaInvoker(DitaConfig(home=tmp_path), runner=runner)

        result = await handle_tool_call(TOOL_NAME, {"parameters": []}, invoker)
        assert texts(result) == ["[Errno 2] No such file or directory"]

    @pytest.mark.asyncio
    async def test_null_character_single_text(self, invoker: DitaInvoker):
        """参数含 NUL 字符时返回单个普通值，而不是错误响应。"""
        result = await handle_tool_call(TOOL_NAME, {"parameters": ["a\x00b"]}, invoker)
        assert len(result) == 1
        assert "null" in result[0].text
        assert "<error>" not in result[0].text

    @pytest.mark.asyncio
    async def test_config_error_raised(self):
        invoker = DitaInvoker(DitaConfig(home=None), runner=mock.Mock(spec=ProcessRunner))
        with pytest.raises(DitaConfigError):
            await handle_tool_call(TOOL_NAME, {"parameters": []}, invoker)

    @pytest.mark.asyncio
    async def test_unknown_tool(self, invoker: DitaInvoker):
        result = await handle_tool_call("codex", {}, invoker)
        assert len(result) == 1
        assert "<error>Unknown tool 'codex'</error>" in result[0].text

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, invoker: DitaInvoker, dita_home: Path, read_calls):
        result = await handle_tool_call(TOOL_NAME, {"parameters": [{"a": 1}]}, invoker)
        assert "Invalid arguments" in result[0].text
        assert read_calls(dita_home) == []


class TestServer:
    """测试 MCP Server 注册的处理器。"""

    @pytest.mark.asyncio
    async def test_list_tools(self, invoker: DitaInvoker):
        server = create_server(invoker)
        handler = server.request_handlers[types.ListToolsRequest]
        result = await handler(types.ListToolsRequest(method="tools/list"))
        tools = result.root.tools
        assert [t.name for t in tools] == [TOOL_NAME]
        assert "parameters" in tools[0].inputSchema["properties"]

    @pytest.mark.asyncio
    async def test_call_tool_success(self, invoker: DitaInvoker, dita_home: Path):
        (dita_home / "stderr.txt").write_text("[DOTJ013E] Failed to parse the referenced file\n")
        server = create_server(invoker)

        result = await call_via_server(server, TOOL_NAME, {"parameters": ["--input=a.ditamap"]})

        assert not result.isError
        assert texts(result.content) == ["[DOTJ013E] Failed to parse the referenced file"]

    @pytest.mark.asyncio
    async def test_call_tool_config_error_is_hard_failure(self):
        runner = mock.Mock(spec=ProcessRunner)
        server = create_server(DitaInvoker(DitaConfig(home=None), runner=runner))

        result = await call_via_server(server, TOOL_NAME, {"parameters": []})

        assert result.isError
        assert "DITA_HOME" in result.content[0].text
        runner.run.assert_not_called()
