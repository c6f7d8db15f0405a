"""Tool base class and data structures.

Defines the interface that all tools must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class ToolDefinition:
    """Definition of a tool exposed by the server."""

    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format.
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ToolResult:
    """Result of a tool execution."""

    content: list[dict[str, Any]]
    is_error: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolResult:
        content = data.get("content")
        if not isinstance(content, list) or not all(isinstance(c, dict) for c in content):
            raise ValueError("'content' must be a list of objects")
        is_error = data.get("isError", False)
        if not isinstance(is_error, bool):
            raise ValueError("'isError' must be a boolean")
        return cls(content=content, is_error=is_error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        return {
            "content": self.content,
            "isError": self.is_error,
        }

    @property
    def text(self) -> str:
        """Concatenated text of all text content items."""
        return "\n".join(item["text"] for item in self.content if item.get("type") == "text")


def text_content(text: str) -> dict[str, Any]:
    """Build a text content item."""
    return {"type": "text", "text": text}


def success_content(content: list[dict[str, Any]]) -> ToolResult:
    """Build a successful result from content items."""
    return ToolResult(content=content, is_error=False)


def error_content(message: str) -> ToolResult:
    """Build an error-flagged result carrying one text item."""
    return ToolResult(content=[text_content(message)], is_error=True)


class Tool(ABC):
    """Abstract base class for all tools.

    A tool describes itself with a ToolDefinition and handles calls made
    with the arguments object from a tools/call request.
    """

    @abstractmethod
    def definition(self) -> ToolDefinition:
        """Return the definition advertised in tools/list.

        Returns:
            ToolDefinition for this tool.
        """
        pass

    @abstractmethod
    def call(self, arguments: dict[str, Any]) -> ToolResult:
        """Execute the tool.

        Args:
            arguments: Tool arguments.

        Returns:
            ToolResult with content and error status.
        """
        pass

    @property
    def name(self) -> str:
        """Return the tool name."""
        return self.definition().name
