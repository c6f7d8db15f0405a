"""MCP Protocol layer: framing, JSON-RPC envelopes and lifecycle."""

from mcp_lite.protocol.jsonrpc import (
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    decode_generic,
    decode_response,
    decode_typed,
    encode,
    format_error,
    format_notification,
    format_request,
    format_response,
)
from mcp_lite.protocol.lifecycle import MCP_PROTOCOL_VERSION, LifecycleManager, SessionState
from mcp_lite.protocol.tools import ToolsHandler
from mcp_lite.protocol.transport import FramedTransport

__all__ = [
    "FramedTransport",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "LifecycleManager",
    "MCP_PROTOCOL_VERSION",
    "SessionState",
    "ToolsHandler",
    "decode_generic",
    "decode_response",
    "decode_typed",
    "encode",
    "format_error",
    "format_notification",
    "format_request",
    "format_response",
]
