"""Exception hierarchy shared by the client and server.

Errors are grouped by tier so callers can tell a fatal failure from a
recoverable one by type alone:

- TransportError: the byte stream is unusable, the session ends.
- ProtocolError: the exchange was invalid, an error response is sent.
- ToolError: the requested operation failed, reported inside a result.
"""

from __future__ import annotations


class MCPError(Exception):
    """Base exception for mcp-lite."""

    pass


class TransportError(MCPError):
    """Raised when the underlying stream fails or closes unexpectedly."""

    pass


class FramingError(TransportError):
    """Raised when a frame header or body violates the framing rules."""

    pass


class ProtocolError(MCPError):
    """Raised when protocol constraints are violated."""

    pass


class ToolError(MCPError):
    """Base exception for tool registration and execution failures."""

    pass


class ToolNotFoundError(ToolError):
    """Raised when a tool is not found."""

    pass


class ToolExecutionError(ToolError):
    """Raised when a tool fails to execute."""

    pass


class ToolRegistrationError(ToolError):
    """Raised when a tool cannot be registered."""

    pass



class ClientError(MCPError):
    """Base exception for client-side failures."""

    pass


class InitializationError(ClientError):
    """Raised when the initialization handshake fails."""

    pass


class ClientStateError(ClientError):
    """Raised when the client is used before initialization completes."""

    pass


class ConfigLoadError(MCPError):
    """Raised when configuration loading or validation fails."""

    pass
