"""MCP lifecycle management.

Handles the initialize/initialized handshake and tracks session state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from mcp_lite.errors import ProtocolError
from mcp_lite.protocol.jsonrpc import INVALID_PARAMS, SERVER_NOT_INITIALIZED, JsonRpcError
from mcp_lite.protocol.types import (
    ClientCapabilities,
    Implementation,
    InitializeParams,
    InitializeResult,
    ServerCapabilities,
)

# The only protocol version spoken; negotiation is an exact match
MCP_PROTOCOL_VERSION = "2025-03-26"


class SessionState(Enum):
    """MCP session lifecycle states."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"


@dataclass
class LifecycleManager:
    """Manages the MCP session lifecycle.

    Handles the initialization handshake and tracks session state. States
    only move forward: UNINITIALIZED -> INITIALIZING -> INITIALIZED.
    """

    server_info: Implementation = field(
        default_factory=lambda: Implementation(name="ExampleServer", version="1.0.0")
    )
    capabilities: ServerCapabilities = field(default_factory=ServerCapabilities.default)
    protocol_version: str = MCP_PROTOCOL_VERSION
    instructions: str | None = None
    state: SessionState = SessionState.UNINITIALIZED
    client_info: Implementation | None = None
    client_capabilities: ClientCapabilities | None = None

    @property
    def is_ready(self) -> bool:
        """Check if the session is ready for operations."""
        return self.state == SessionState.INITIALIZED

    def require_ready(self, method: str) -> None:
        """Assert that the session is ready.

        Args:
            method: Method of the request being checked.

        Raises:
            JsonRpcError: SERVER_NOT_INITIALIZED if the handshake has not
                completed.
        """
        if self.state == SessionState.UNINITIALIZED:
            raise JsonRpcError(
                SERVER_NOT_INITIALIZED,
                "Server not initialized. 'initialize' must be the first request.",
            )
        if self.state == SessionState.INITIALIZING:
            raise JsonRpcError(
                SERVER_NOT_INITIALIZED,
                f"Server is initializing. Received unexpected method '{method}'. "
                "Waiting for 'notifications/initialized'.",
            )

    def handle_initialize(self, params: InitializeParams) -> InitializeResult:
        """Handle initialize request.

        Args:
            params: Initialize request parameters.

        Returns:
            Initialize response result.

        Raises:
            ProtocolError: If not in the UNINITIALIZED state.
            JsonRpcError: INVALID_PARAMS if the protocol version differs.
        """
        if self.state != SessionState.UNINITIALIZED:
            raise ProtocolError("Server already initialized")

        if params.protocol_version != self.protocol_version:
            raise JsonRpcError(
                INVALID_PARAMS,
                "Unsupported protocol version",
                data={
                    "supported": [self.protocol_version],
                    "requested": params.protocol_version,
                },
            )

        self.client_info = params.client_info
        self.client_capabilities = params.capabilities

        self.state = SessionState.INITIALIZING

        return InitializeResult(
            protocol_version=self.protocol_version,
            capabilities=self.capabilities,
            server_info=self.server_info,
            instructions=self.instructions,
        )

    def handle_initialized(self) -> None:
        """Handle initialized notification.

        Raises:
            ProtocolError: If not in initializing state.
        """
        if self.state != SessionState.INITIALIZING:
            raise ProtocolError("Server not initializing")

        self.state = SessionState.INITIALIZED
