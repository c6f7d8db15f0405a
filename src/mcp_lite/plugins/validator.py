"""Schema checks for tool definitions.

Only the schema itself is checked, at registration. Arguments are passed
to the tool unchecked; each tool validates the fields it reads.
"""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from mcp_lite.errors import ToolRegistrationError


def check_input_schema(tool_name: str, schema: dict[str, Any]) -> None:
    """Check that a tool's input schema is itself a valid JSON Schema.

    Args:
        tool_name: Name of the tool (for error messages).
        schema: JSON Schema advertised for the tool's input.

    Raises:
        ToolRegistrationError: If the schema is invalid.
    """
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as e:
        raise ToolRegistrationError(f"Invalid schema for tool {tool_name}: {e.message}") from e
