"""Greeting tool."""

from __future__ import annotations

from typing import Any

from mcp_lite.plugins.base import (
    Tool,
    ToolDefinition,
    ToolResult,
    error_content,
    success_content,
    text_content,
)


class GreetTool(Tool):
    """Generates a greeting for a given name."""

    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="greet",
            description="Generate a greeting message for a given name",
            input_schema={
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "description": "The name to greet",
                    },
                },
                "required": ["name"],
            },
        )

    def call(self, arguments: dict[str, Any]) -> ToolResult:
        name = arguments.get("name")
        if not isinstance(name, str):
            return error_content("Missing required parameter 'name'")
        return success_content([text_content(f"Hello, {name}! Welcome to the MCP server.")])
