"""MCP tools/list and tools/call handlers.

Handles tool-related MCP requests, routing them through the tool dispatcher.
Tool failures become error-flagged results carried in a successful
response; they never escape as protocol errors.
"""

from __future__ import annotations

from mcp_lite.errors import ToolExecutionError, ToolNotFoundError
from mcp_lite.plugins.base import ToolResult, error_content
from mcp_lite.plugins.dispatcher import ToolDispatcher
from mcp_lite.protocol.types import ToolsCallParams, ToolsListParams, ToolsListResult


class ToolsHandler:
    """Handles tools/list and tools/call MCP requests.

    Routes requests through the tool dispatcher and formats
    results according to MCP specification.
    """

    def __init__(self, dispatcher: ToolDispatcher) -> None:
        """Initialize the handler.

        Args:
            dispatcher: Tool dispatcher for routing calls.
        """
        self._dispatcher = dispatcher

    def handle_list(self, params: ToolsListParams | None = None) -> ToolsListResult:
        """Handle tools/list request.

        The cursor is accepted but every listing is a single page.

        Returns:
            ToolsListResult with all available tools.
        """
        return ToolsListResult(tools=self._dispatcher.list_tools())

    def handle_call(self, params: ToolsCallParams) -> ToolResult:
        """Handle tools/call request.

        Args:
            params: Tool name and arguments.

        Returns:
            ToolResult with execution result.
        """
        try:
            return self._dispatcher.call_tool(params.name, params.arguments)
        except ToolNotFoundError:
            return error_content(f"Tool not found: {params.name}")
        except ToolExecutionError as e:
            return error_content(f"Tool execution failed: {e}")
