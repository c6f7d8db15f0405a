"""Tests for the demo tools and the add method."""

from mcp_lite.plugins import ADD_METHOD, GetTimeTool, GreetTool, add
from mcp_lite.plugins.base import ToolResult, error_content, success_content, text_content
from mcp_lite.protocol.types import AddParams


class TestContentHelpers:
    def test_text_content(self):
        assert text_content("hi") == {"type": "text", "text": "hi"}

    def test_success_content(self):
        result = success_content([text_content("a"), text_content("b")])

        assert result.to_dict() == {
            "content": [{"type": "text", "text": "a"}, {"type": "text", "text": "b"}],
            "isError": False,
        }
        assert result.text == "a\nb"

    def test_error_content(self):
        result = error_content("boom")

        assert result == ToolResult(content=[{"type": "text", "text": "boom"}], is_error=True)


class TestGreetTool:
    """Tests for the greet tool."""

    def test_definition(self):
        definition = GreetTool().definition()

        assert definition.name == "greet"
        assert definition.input_schema["required"] == ["name"]

    def test_greets_by_name(self):
        result = GreetTool().call({"name": "Ada"})

        assert not result.is_error
        assert result.text == "Hello, Ada! Welcome to the MCP server."

    def test_missing_name(self):
        result = GreetTool().call({})

        assert result.is_error
        assert result.text == "Missing required parameter 'name'"

    def test_non_string_name(self):
        assert GreetTool().call({"name": 42}).is_error


class TestGetTimeTool:
    """Tests for the clock tool."""

    def test_definition(self):
        definition = GetTimeTool().definition()

        assert definition.name == "get_time"
        assert definition.input_schema == {
            "type": "object",
            "properties": {},
            "additionalProperties": False,
        }

    def test_reports_unix_timestamp(self):
        result = GetTimeTool(clock=lambda: 1_700_000_000.75).call({})

        assert not result.is_error
        assert result.text == "Current Unix timestamp: 1700000000"

    def test_uses_system_clock_by_default(self):
        result = GetTimeTool().call({})

        assert result.text.startswith("Current Unix timestamp: ")
        assert int(result.text.rsplit(" ", 1)[1]) > 0


class TestAdd:
    def test_method_name(self):
        assert ADD_METHOD == "add"

    def test_adds(self):
        assert add(AddParams(a=3, b=4)) == 7
        assert add(AddParams(a=-10, b=4)) == -6
