"""Clock tool reporting the current Unix time."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from mcp_lite.plugins.base import Tool, ToolDefinition, ToolResult, success_content, text_content


class GetTimeTool(Tool):
    """Reports the current system time as a Unix timestamp."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize the tool.

        Args:
            clock: Source of the current time in seconds since the epoch.
        """
        self._clock = clock

    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="get_time",
            description="Get the current system time",
            input_schema={
                "type": "object",
                "properties": {},
                "additionalProperties": False,
            },
        )

    def call(self, arguments: dict[str, Any]) -> ToolResult:
        timestamp = int(self._clock())
        return success_content([text_content(f"Current Unix timestamp: {timestamp}")])
