"""MCP runtime adapter over FastMCP."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError as FastToolError
from fastmcp.tools import Tool as FastTool
from fastmcp.tools.tool import ToolResult as FastToolResult
from mcp.types import TextContent
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from aws_readonly_mcp.dispatcher import Dispatcher
    from aws_readonly_mcp.tools.base import ToolSpec

logger = logging.getLogger(__name__)


class ToolResult(BaseModel):
    """Response envelope for one tool call."""

    content: list[dict[str, object]]
    is_error: bool = False
    structured_content: dict[str, object] | None = None

    @property
    def text(self) -> str:
        return "".join(str(block.get("text", "")) for block in self.content)


class DispatchedTool(FastTool):
    """FastMCP tool that hands the raw call arguments to the dispatcher.

    FastMCP does no argument parsing for these tools, so unknown keys and
    out-of-range values reach ``Dispatcher.dispatch`` and come back as the
    usual ``{"error": ...}`` envelope.
    """

    dispatcher: Any = Field(exclude=True)

    async def run(self, arguments: dict[str, Any]) -> FastToolResult:
        result = await self.dispatcher.dispatch(self.name, arguments)
        if result.is_error:
            # FastMCP reports ToolError as a result with isError=true.
            raise FastToolError(result.text)
        return FastToolResult(
            content=[TextContent(type="text", text=result.text)],
            structured_content=result.structured_content,
        )


class MCPServer:
    """Thin wrapper that exposes dispatcher-backed tools through FastMCP."""

    def __init__(self, name: str, version: str, instructions: str) -> None:
        # Input checks belong to the dispatcher; the protocol layer must not
        # reject calls against the advertised schema first.
        self._server: Any = FastMCP(
            name=name,
            version=version,
            instructions=instructions,
            strict_input_validation=False,
        )

    def add_tool(self, tool: "ToolSpec", dispatcher: "Dispatcher") -> None:
        fast_tool = DispatchedTool(
            name=tool.name,
            description=tool.description,
            parameters=tool.input_schema,
            output_schema=None,
            dispatcher=dispatcher,
        )
        self._server.add_tool(fast_tool)
        logger.debug("Registered tool %s", tool.name)

    def run(self) -> None:
        self._server.run()
