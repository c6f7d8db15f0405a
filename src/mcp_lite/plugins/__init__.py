"""Tool registry and the demo tools."""

from mcp_lite.plugins.arithmetic import ADD_METHOD, add
from mcp_lite.plugins.base import (
    Tool,
    ToolDefinition,
    ToolResult,
    error_content,
    success_content,
    text_content,
)
from mcp_lite.plugins.clock import GetTimeTool
from mcp_lite.plugins.dispatcher import ToolDispatcher
from mcp_lite.plugins.greet import GreetTool

__all__ = [
    "ADD_METHOD",
    "GetTimeTool",
    "GreetTool",
    "Tool",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolResult",
    "add",
    "error_content",
    "success_content",
    "text_content",
]
