"""Tool dispatcher - routes tool calls to the registered tool."""

from __future__ import annotations

from typing import Any

from mcp_lite.errors import ToolExecutionError, ToolNotFoundError, ToolRegistrationError
from mcp_lite.plugins.base import Tool, ToolDefinition, ToolResult
from mcp_lite.plugins.validator import check_input_schema


class ToolDispatcher:
    """Routes tool calls to registered tools.

    Keeps tools in registration order with unique names. Once frozen the
    registry is read-only.
    """

    def __init__(self) -> None:
        """Initialize the dispatcher."""
        self._tools: dict[str, Tool] = {}
        self._definitions: list[ToolDefinition] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register.

        Raises:
            ToolRegistrationError: If the registry is frozen or the name is
                already taken, or the input schema is invalid.
        """
        if self._frozen:
            raise ToolRegistrationError("Tools must be registered before the server starts")

        definition = tool.definition()
        if definition.name in self._tools:
            raise ToolRegistrationError(f"Duplicate tool name: {definition.name}")
        check_input_schema(definition.name, definition.input_schema)

        self._tools[definition.name] = tool
        self._definitions.append(definition)

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    def __contains__(self, tool_name: str) -> bool:
        return tool_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list_tools(self) -> list[dict[str, Any]]:
        """List all available tools in MCP format.

        Returns:
            List of tool definitions in registration order.
        """
        return [definition.to_dict() for definition in self._definitions]

    def call_tool(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        """Call a tool by name.

        Args:
            tool_name: Name of the tool to call.
            arguments: Arguments to pass to the tool.

        Returns:
            ToolResult from the tool execution.

        Raises:
            ToolNotFoundError: If the tool is not registered.
            ToolExecutionError: If the tool fails to execute.
        """
        tool = self._tools.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(f"Tool not found: {tool_name}")

        try:
            result = tool.call(arguments)
        except Exception as e:
            raise ToolExecutionError(f"Tool '{tool_name}' execution failed: {e}") from e

        if not isinstance(result, ToolResult):
            raise ToolExecutionError(f"Tool '{tool_name}' returned an invalid result")
        return result

    def get_tool_schema(self, tool_name: str) -> dict[str, Any] | None:
        """Get the input schema for a tool.

        Args:
            tool_name: Name of the tool.

        Returns:
            Input schema dict or None if tool not found.
        """
        for definition in self._definitions:
            if definition.name == tool_name:
                return definition.input_schema
        return None
