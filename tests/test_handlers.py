"""Tests for the mdsel tool handlers."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mdsel_claude.models import ExecutionResult, ToolResult
from mdsel_claude.server import handlers
from mdsel_claude.server.handlers import (
    FALLBACK_ERROR_TEXT,
    ToolAdapter,
    get_adapter,
    handle_index,
    handle_select,
    to_tool_result,
)


@pytest.fixture
def executor():
    mock = MagicMock()
    mock.execute = AsyncMock(return_value=ExecutionResult(stdout="raw output\n", exit_code=0))
    return mock


@pytest.fixture
def adapter(executor):
    return ToolAdapter(executor, timeout=5)


class TestIndex:
    @pytest.mark.asyncio
    async def test_forwards_files(self, adapter, executor):
        result = await adapter.index(["a.md", "b.md"])
        executor.execute.assert_awaited_once_with("index", ["a.md", "b.md"])
        assert result == ToolResult("raw output\n")

    @pytest.mark.asyncio
    async def test_stdout_relayed_verbatim(self, adapter, executor):
        payload = '  {"not": "parsed"  \n\n\t'
        executor.execute.return_value = ExecutionResult(stdout=payload)
        result = await adapter.index(["a.md"])
        assert result.text == payload
        assert not result.is_error

    @pytest.mark.asyncio
    async def test_missing_file_surfaces_stderr(self, adapter, executor):
        stderr = "Error: ENOENT: no such file or directory, open 'missing.md'\n"
        executor.execute.return_value = ExecutionResult(stderr=stderr, exit_code=1)
        result = await adapter.index(["missing.md"])
        assert result.is_error
        assert result.text == stderr

    @pytest.mark.asyncio
    async def test_empty_stderr_uses_fallback(self, adapter, executor):
        executor.execute.return_value = ExecutionResult(stdout="partial", exit_code=3)
        result = await adapter.index(["a.md"])
        assert result == ToolResult(FALLBACK_ERROR_TEXT, is_error=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("files", [[], None, "a.md", ["a.md", 3]])
    async def test_rejects_bad_file_list(self, adapter, executor, files):
        result = await adapter.index(files)
        assert result.is_error
        assert "files" in result.text
        executor.execute.assert_not_awaited()


class TestSelect:
    @pytest.mark.asyncio
    async def test_selector_goes_first(self, adapter, executor):
        await adapter.select("h2.0", ["README.md"])
        executor.execute.assert_awaited_once_with("select", ["h2.0", "README.md"])

    @pytest.mark.asyncio
    async def test_selector_not_validated(self, adapter, executor):
        await adapter.select("not a :: real [selector", ["a.md", "b.md"])
        executor.execute.assert_awaited_once_with("select", ["not a :: real [selector", "a.md", "b.md"])

    @pytest.mark.asyncio
    async def test_cli_error_relayed(self, adapter, executor):
        executor.execute.return_value = ExecutionResult(stderr="Invalid selector: ???", exit_code=1)
        result = await adapter.select("???", ["a.md"])
        assert result == ToolResult("Invalid selector: ???", is_error=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("selector", ["", None, 5])
    async def test_rejects_bad_selector(self, adapter, executor, selector):
        result = await adapter.select(selector, ["a.md"])
        assert result.is_error
        assert "selector" in result.text
        executor.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_empty_files(self, adapter, executor):
        result = await adapter.select("h1.0", [])
        assert result.is_error
        executor.execute.assert_not_awaited()


class TestFailureNormalization:
    @pytest.mark.asyncio
    async def test_timeout(self, executor):
        async def hang(operation, args):
            await asyncio.sleep(10)

        executor.execute = hang
        adapter = ToolAdapter(executor, timeout=1)
        result = await adapter.index(["a.md"])
        assert result == ToolResult("mdsel timed out after 1s", is_error=True)

    @pytest.mark.asyncio
    async def test_no_timeout_when_disabled(self, executor):
        adapter = ToolAdapter(executor, timeout=0)
        with patch("mdsel_claude.server.handlers.asyncio.wait_for") as wait_for:
            result = await adapter.index(["a.md"])
        wait_for.assert_not_called()
        assert result.text == "raw output\n"

    @pytest.mark.asyncio
    async def test_unexpected_exception_converted(self, adapter, executor):
        executor.execute.side_effect = RuntimeError("boom")
        result = await adapter.index(["a.md"])
        assert result == ToolResult("boom", is_error=True)

    def test_to_tool_result_success(self):
        assert to_tool_result(ExecutionResult(stdout="ok", stderr="warn")) == ToolResult("ok")

    def test_to_tool_result_spawn_failure(self):
        result = to_tool_result(ExecutionResult(stderr="mdsel CLI not found", exit_code=-1))
        assert result == ToolResult("mdsel CLI not found", is_error=True)


class TestModuleHandlers:
    def test_adapter_built_from_config(self, monkeypatch):
        monkeypatch.setenv("MDSEL_CLI", "/custom/mdsel")
        monkeypatch.setenv("MDSEL_TIMEOUT", "7")
        adapter = get_adapter()
        assert adapter.executor.binary == "/custom/mdsel"
        assert adapter.timeout == 7
        assert get_adapter() is adapter

    @pytest.mark.asyncio
    async def test_handle_index_and_select(self, adapter, executor, monkeypatch):
        monkeypatch.setattr(handlers, "_adapter", adapter)
        await handle_index(["a.md"])
        await handle_select("h1.0", ["a.md"])
        assert executor.execute.await_args_list[0].args == ("index", ["a.md"])
        assert executor.execute.await_args_list[1].args == ("select", ["h1.0", "a.md"])
