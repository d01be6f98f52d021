"""Tool handlers for mdsel_index and mdsel_select."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mdsel_claude.config import get_config
from mdsel_claude.models import ExecutionResult, ToolResult
from mdsel_claude.services.executor import CliExecutor

logger = logging.getLogger(__name__)

FALLBACK_ERROR_TEXT = "mdsel exited with a non-zero status and no error output."


def _is_file_list(files: Any) -> bool:
    return isinstance(files, list) and len(files) > 0 and all(isinstance(f, str) for f in files)


class ToolAdapter:
    """Forward tool calls to the mdsel CLI and relay its output untouched."""

    def __init__(self, executor: CliExecutor, timeout: int = 0) -> None:
        self.executor = executor
        self.timeout = timeout

    async def index(self, files: Any) -> ToolResult:
        if not _is_file_list(files):
            return ToolResult("files must be a non-empty list of file paths", is_error=True)
        return await self._run("index", list(files))

    async def select(self, selector: Any, files: Any) -> ToolResult:
        if not isinstance(selector, str) or not selector:
            return ToolResult("selector must be a non-empty string", is_error=True)
        if not _is_file_list(files):
            return ToolResult("files must be a non-empty list of file paths", is_error=True)
        # selector goes ahead of the file list
        return await self._run("select", [selector, *files])

    async def _run(self, operation: str, args: list[str]) -> ToolResult:
        try:
            if self.timeout > 0:
                result = await asyncio.wait_for(
                    self.executor.execute(operation, args),
                    timeout=self.timeout,
                )
            else:
                result = await self.executor.execute(operation, args)
        except asyncio.TimeoutError:
            logger.warning("mdsel %s timed out after %ds", operation, self.timeout)
            return ToolResult(f"mdsel timed out after {self.timeout}s", is_error=True)
        except Exception as e:
            logger.exception("mdsel %s execution error", operation)
            return ToolResult(str(e) or FALLBACK_ERROR_TEXT, is_error=True)

        return to_tool_result(result)


def to_tool_result(result: ExecutionResult) -> ToolResult:
    """Map an execution result to the agent-facing shape without touching the text."""
    if result.succeeded:
        return ToolResult(result.stdout)
    return ToolResult(result.stderr or FALLBACK_ERROR_TEXT, is_error=True)


# Lazy-initialized adapter
_adapter: ToolAdapter | None = None


def get_adapter() -> ToolAdapter:
    global _adapter
    if _adapter is None:
        config = get_config()
        _adapter = ToolAdapter(CliExecutor(config.cli.binary), timeout=config.cli.timeout)
    return _adapter


def reset_adapter() -> None:
    """Drop the cached adapter (for testing)."""
    global _adapter
    _adapter = None


async def handle_index(files: Any) -> ToolResult:
    """Handle an mdsel_index call."""
    return await get_adapter().index(files)


async def handle_select(selector: Any, files: Any) -> ToolResult:
    """Handle an mdsel_select call."""
    return await get_adapter().select(selector, files)
