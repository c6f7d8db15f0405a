"""MCP Server - handshake state machine and message loop.

Integrates the codec, lifecycle manager and tool dispatcher into a server
that handles one framed message at a time.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from mcp_lite.audit import AuditLogger, AuditRecord, Outcome
from mcp_lite.config import ServerConfig
from mcp_lite.errors import ProtocolError, TransportError
from mcp_lite.plugins.base import Tool, ToolResult
from mcp_lite.plugins.dispatcher import ToolDispatcher
from mcp_lite.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    ParamsType,
    RawMessage,
    decode_generic,
    decode_typed,
    format_error,
    format_response,
)
from mcp_lite.protocol.lifecycle import LifecycleManager, SessionState
from mcp_lite.protocol.tools import ToolsHandler
from mcp_lite.protocol.transport import FramedTransport
from mcp_lite.protocol.types import (
    ClientCapabilities,
    Implementation,
    InitializeParams,
    ServerCapabilities,
    ToolsCallParams,
    ToolsListParams,
)

INITIALIZE = "initialize"
INITIALIZED = "notifications/initialized"
TOOLS_LIST = "tools/list"
TOOLS_CALL = "tools/call"

RESERVED_METHODS = frozenset({INITIALIZE, INITIALIZED, TOOLS_LIST, TOOLS_CALL})

MethodHandler = Callable[[Any], Any]


class MessageOutcome(Enum):
    """Outcome of processing one frame."""

    CONTINUE = "continue"
    END_OF_STREAM = "end_of_stream"


class MCPServer:
    """MCP Server implementation.

    Provides a server that handles:
    - Lifecycle management (initialize/initialized)
    - Tool listing and execution
    - Application methods registered by name

    Each instance owns exactly one session.
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        log: Callable[[str], None] | None = None,
        capabilities: ServerCapabilities | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            config: Server configuration (defaults used when omitted).
            log: Diagnostic log sink. When omitted, the transport passed to
                serve() or process_next() logs to its stderr stream.
            capabilities: Capabilities advertised in the initialize result.
        """
        self._config = config or ServerConfig()
        self._log_sink = log

        self._lifecycle = LifecycleManager(
            server_info=Implementation(
                name=self._config.server_name, version=self._config.server_version
            ),
            capabilities=capabilities or ServerCapabilities.default(),
            protocol_version=self._config.protocol_version,
            instructions=self._config.instructions,
        )
        self._dispatcher = ToolDispatcher()
        self._tools_handler = ToolsHandler(self._dispatcher)
        self._methods: dict[str, tuple[MethodHandler, type[ParamsType] | None]] = {}

        if self._config.audit_log_file:
            self._audit_logger: AuditLogger | None = AuditLogger(
                Path(self._config.audit_log_file)
            )
        else:
            self._audit_logger = None

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._lifecycle.state

    @property
    def is_ready(self) -> bool:
        return self._lifecycle.is_ready

    @property
    def client_info(self) -> Implementation | None:
        """Client info received in initialize, or None before it."""
        return self._lifecycle.client_info

    @property
    def client_capabilities(self) -> ClientCapabilities | None:
        return self._lifecycle.client_capabilities

    def register_tool(self, tool: Tool) -> None:
        """Register a tool.

        Args:
            tool: Tool to register.

        Raises:
            ToolRegistrationError: If the name is taken or the server has
                started serving.
        """
        self._dispatcher.register(tool)

    def register_method(
        self,
        name: str,
        handler: MethodHandler,
        params_type: type[ParamsType] | None = None,
    ) -> None:
        """Register an application method available after initialization.

        Args:
            name: JSON-RPC method name.
            handler: Callable receiving the typed params and returning the
                result payload.
            params_type: Type used to parse params, or None for raw params.

        Raises:
            ValueError: If the name is reserved, already registered, or the
                server has started serving.
        """
        if self._dispatcher.frozen:
            raise ValueError("Methods must be registered before the server starts")
        if name in RESERVED_METHODS or name in self._methods:
            raise ValueError(f"Method already registered: {name}")
        self._methods[name] = (handler, params_type)

    def _bind_log(self, transport: FramedTransport) -> None:
        if self._log_sink is None:
            self._log_sink = transport.log

    def _log(self, message: str) -> None:
        if self._log_sink is not None:
            self._log_sink(message)

    def list_tools(self) -> list[dict[str, Any]]:
        """List all registered tools.

        Returns:
            List of tool definitions.
        """
        return self._dispatcher.list_tools()

    # ------------------------------------------------------------------
    # Message loop
    # ------------------------------------------------------------------

    def serve(self, transport: FramedTransport) -> None:
        """Handle frames until the peer closes the stream.

        Args:
            transport: Framed transport connected to the client.

        Raises:
            TransportError: If the stream fails or a frame is malformed.
        """
        self._bind_log(transport)
        self._log("Starting message loop")
        while True:
            try:
                outcome = self.process_next(transport)
            except TransportError as e:
                self._log(f"Error handling message: {e}")
                raise
            if outcome is MessageOutcome.END_OF_STREAM:
                self._log("Client disconnected, shutting down")
                return

    def process_next(self, transport: FramedTransport) -> MessageOutcome:
        """Read one frame, handle it, and write the response if any.

        Args:
            transport: Framed transport connected to the client.

        Returns:
            CONTINUE after a handled frame, END_OF_STREAM on clean EOF.

        Raises:
            TransportError: If the stream fails or a frame is malformed.
        """
        self._dispatcher.freeze()
        self._bind_log(transport)

        body = transport.read_frame()
        if body is None:
            return MessageOutcome.END_OF_STREAM

        response = self.handle_message(body)
        if response is not None:
            transport.write_frame(response)
        return MessageOutcome.CONTINUE

    def handle_message(self, body: bytes | str) -> bytes | None:
        """Handle one JSON-RPC message.

        Args:
            body: Frame body.

        Returns:
            Encoded response, or None when nothing is sent back.
        """
        started = time.monotonic()
        try:
            raw = decode_generic(body)
        except JsonRpcError as e:
            if e.code == PARSE_ERROR or e.request_id is not None:
                response = format_error(e.request_id, e.code, e.message, e.data)
                record = AuditRecord(method=None, request_id=e.request_id, state=self.state.value)
                self._audit(record, started, response, e.code)
                return response
            self._log(f"Ignoring malformed message: {e.message}")
            return None

        record = AuditRecord(method=raw.method, request_id=raw.id, state=self.state.value)

        if raw.method is None:
            if raw.is_notification:
                self._log("Ignoring message without method or id")
                return None
            response = format_error(
                raw.id, INVALID_REQUEST, "Invalid Request: method must be a string"
            )
            self._audit(record, started, response, INVALID_REQUEST)
            return response

        try:
            response = self._dispatch(raw, record)
        except JsonRpcError as e:
            if raw.is_notification:
                self._log(f"Ignoring notification '{raw.method}': {e.message}")
                response = None
            else:
                response = format_error(raw.id, e.code, e.message, e.data)
            self._audit(record, started, response, e.code)
            return response
        except Exception as e:
            self._log(f"Internal error handling '{raw.method}': {e}")
            response = None
            if not raw.is_notification:
                response = format_error(raw.id, INTERNAL_ERROR, f"Internal error: {e}")
            self._audit(record, started, response, INTERNAL_ERROR)
            return response

        self._audit(record, started, response)
        return response

    def _audit(
        self,
        record: AuditRecord,
        started: float,
        response: bytes | None,
        error_code: int | None = None,
    ) -> None:
        if self._audit_logger is None:
            return
        if response is None:
            record.outcome = Outcome.NO_RESPONSE
        elif error_code is not None:
            record.outcome = Outcome.ERROR
        else:
            record.outcome = Outcome.RESULT
        record.error_code = error_code
        record.duration_ms = (time.monotonic() - started) * 1000
        self._audit_logger.record(record)

    def _dispatch(self, raw: RawMessage, record: AuditRecord) -> bytes | None:
        """Decide the action for the current (state, method) pair."""
        state = self._lifecycle.state
        method = raw.method

        if state == SessionState.UNINITIALIZED:
            if method == INITIALIZE and not raw.is_notification:
                return self._handle_initialize(raw)
            return self._reject_not_ready(raw)

        if state == SessionState.INITIALIZING:
            if method == INITIALIZED and raw.is_notification:
                self._lifecycle.handle_initialized()
                self._log("Received initialized notification, session ready")
                return None
            return self._reject_not_ready(raw)

        return self._handle_ready(raw, record)

    def _reject_not_ready(self, raw: RawMessage) -> None:
        if raw.is_notification:
            self._log(
                f"Ignoring notification '{raw.method}' in state {self._lifecycle.state.value}"
            )
            return None
        self._lifecycle.require_ready(raw.method)
        # require_ready always raises before the handshake completes
        raise ProtocolError("Session state changed unexpectedly")

    def _handle_initialize(self, raw: RawMessage) -> bytes:
        request = decode_typed(raw, InitializeParams)
        result = self._lifecycle.handle_initialize(request.params)
        self._log(
            f"Initialized by {request.params.client_info.name} "
            f"{request.params.client_info.version}"
        )
        return format_response(raw.id, result)

    def _handle_ready(self, raw: RawMessage, record: AuditRecord) -> bytes | None:
        method = raw.method

        if method == TOOLS_LIST:
            request = decode_typed(raw, ToolsListParams)
            result: Any = self._tools_handler.handle_list(request.params)
        elif method == TOOLS_CALL:
            request = decode_typed(raw, ToolsCallParams)
            result = self._call_tool(request.params, record)
        elif method in self._methods:
            handler, params_type = self._methods[method]
            request = decode_typed(raw, params_type)
            result = handler(request.params)
        else:
            if raw.is_notification:
                self._log(f"Ignoring unknown notification '{method}'")
                return None
            raise JsonRpcError(METHOD_NOT_FOUND, f"Method not found: '{method}'")

        if raw.is_notification:
            return None
        return format_response(raw.id, result)

    def _call_tool(self, params: ToolsCallParams, record: AuditRecord) -> ToolResult:
        record.tool_name = params.name
        record.tool_arguments = params.arguments
        result = self._tools_handler.handle_call(params)
        record.tool_is_error = result.is_error
        return result

    def close(self) -> None:
        """Close the server and release the audit log."""
        if self._audit_logger is not None:
            self._audit_logger.close()

    def __enter__(self) -> MCPServer:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
