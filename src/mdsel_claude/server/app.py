"""MCP server setup and lifecycle."""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from mdsel_claude import __version__
from mdsel_claude.config import AppConfig
from mdsel_claude.models import ToolResult
from mdsel_claude.server.handlers import handle_index, handle_select

logger = logging.getLogger(__name__)

SERVER_NAME = "mdsel-claude"

INDEX_DESCRIPTION = """\
Index Markdown documents to discover available selectors. REQUIRED: Call this BEFORE mdsel_select when working with Markdown documents over 200 words. Do NOT use the Read tool for large Markdown files - use mdsel_index first to understand the document structure, then mdsel_select to retrieve specific sections.

Returns: JSON with selector inventory including headings, blocks (paragraphs, code, lists, tables), and word counts for each section.

Selector Grammar:
- namespace::type[index]/path?query
- Types: heading:h1-h6, section, block:paragraph, block:code, block:list, block:table
- Example: readme::heading:h2[0]/block:code[0]"""

SELECT_DESCRIPTION = """\
Retrieve specific content from Markdown documents using selectors. REQUIRED: Call mdsel_index first to discover available selectors. Do NOT use the Read tool for large Markdown files.

Returns: JSON with matched content and available child selectors for further drilling.

Selector Syntax:
- [namespace::]type[index][/path][?full=true]
- Types: heading:h1-h6, section, block:paragraph, block:code, block:list, block:table, block:blockquote
- Examples:
  - heading:h2[0] - First h2 heading
  - readme::heading:h1[0]/block:code[0] - First code block under first h1 in readme
  - section[1]?full=true - Second section with full content (bypass truncation)

Usage Pattern:
1. mdsel_index to discover selectors
2. mdsel_select with discovered selectors
3. Drill down with child selectors as needed"""

FILES_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {"type": "string"},
    "minItems": 1,
    "description": "Array of absolute file paths to Markdown documents",
}

TOOLS = [
    types.Tool(
        name="mdsel_index",
        description=INDEX_DESCRIPTION,
        inputSchema={
            "type": "object",
            "properties": {"files": FILES_SCHEMA},
            "required": ["files"],
            "additionalProperties": False,
        },
    ),
    types.Tool(
        name="mdsel_select",
        description=SELECT_DESCRIPTION,
        inputSchema={
            "type": "object",
            "properties": {
                "selector": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Selector string (e.g., 'heading:h2[0]', 'readme::section[1]?full=true')",
                },
                "files": FILES_SCHEMA,
            },
            "required": ["selector", "files"],
            "additionalProperties": False,
        },
    ),
]


async def dispatch_tool(name: str, arguments: dict[str, Any] | None) -> ToolResult:
    """Route a tool call to its handler."""
    args = arguments or {}
    if name == "mdsel_index":
        return await handle_index(args.get("files"))
    if name == "mdsel_select":
        return await handle_select(args.get("selector"), args.get("files"))
    return ToolResult(f"Unknown tool: {name}", is_error=True)


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def create_server() -> Server:
    """Build the MCP server exposing the two mdsel tools."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        logger.debug("Tool call: %s %s", name, arguments)
        return to_call_tool_result(await dispatch_tool(name, arguments))

    return server


async def run_server(config: AppConfig) -> None:
    """Serve the mdsel tools over stdio until the client disconnects."""
    server = create_server()
    logger.info("MCP server starting (mdsel CLI: %s, timeout: %ss)", config.cli.binary, config.cli.timeout)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())

    logger.info("MCP server stopped.")
