"""MCP Client - initialization sequencer and request helpers.

The client drives the handshake (initialize request, result check,
initialized notification) and only then allows application requests.
"""

from __future__ import annotations

from typing import Any, BinaryIO

from mcp_lite.errors import ClientStateError, InitializationError, TransportError
from mcp_lite.plugins.base import ToolResult
from mcp_lite.protocol.jsonrpc import (
    INVALID_REQUEST,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    ParamsType,
    decode_response,
    encode,
)
from mcp_lite.protocol.lifecycle import MCP_PROTOCOL_VERSION
from mcp_lite.protocol.types import (
    AddParams,
    ClientCapabilities,
    Implementation,
    InitializeParams,
    InitializeResult,
    ListChangedCapability,
    ToolsCallParams,
    ToolsListParams,
    ToolsListResult,
)
from mcp_lite.protocol.transport import FramedTransport


class MCPClient:
    """Synchronous MCP client over a framed transport.

    Requests are strictly sequential: each request blocks until its
    response has been read.
    """

    def __init__(
        self,
        transport: FramedTransport,
        client_info: Implementation | None = None,
        capabilities: ClientCapabilities | None = None,
        protocol_version: str = MCP_PROTOCOL_VERSION,
    ) -> None:
        """Initialize the client.

        Args:
            transport: Framed transport connected to the server.
            client_info: Name and version sent in initialize.
            capabilities: Capabilities sent in initialize.
            protocol_version: Protocol version requested from the server.
        """
        self._transport = transport
        self._client_info = client_info or Implementation(name="ExampleClient", version="1.0.0")
        self._capabilities = capabilities or ClientCapabilities(
            roots=ListChangedCapability(list_changed=True)
        )
        self._protocol_version = protocol_version
        self._next_id = 1
        self._initialized = False
        self.server_result: InitializeResult | None = None

    @classmethod
    def from_streams(cls, reader: BinaryIO, writer: BinaryIO, **kwargs: Any) -> MCPClient:
        """Create a client over raw byte streams (e.g. a child's stdout/stdin)."""
        return cls(FramedTransport(reader=reader, writer=writer), **kwargs)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> InitializeResult:
        """Perform the initialization handshake.

        Returns:
            The server's initialize result.

        Raises:
            InitializationError: If the server answers with an error, a
                mismatched id, or a different protocol version.
            TransportError: If the stream fails or closes.
        """
        if self._initialized:
            raise ClientStateError("Client already initialized")

        params = InitializeParams(
            protocol_version=self._protocol_version,
            capabilities=self._capabilities,
            client_info=self._client_info,
        )
        try:
            response = self._exchange("initialize", params, InitializeResult)
        except JsonRpcError as e:
            raise InitializationError(f"Malformed initialize response: {e}") from e

        if response.error is not None:
            raise InitializationError(
                f"Initialization failed: {response.error.message} (code {response.error.code})"
            )

        result = response.result
        if result.protocol_version != self._protocol_version:
            raise InitializationError(
                f"Unsupported server protocol version: {result.protocol_version}"
            )

        self._send(JsonRpcNotification(method="notifications/initialized"))
        self.server_result = result
        self._initialized = True
        return result

    def request(
        self,
        method: str,
        params: Any | None = None,
        result_type: type[ParamsType] | None = None,
    ) -> Any:
        """Send a request and return its result.

        Args:
            method: JSON-RPC method name.
            params: Params object (typed or plain dict).
            result_type: Type used to parse the result, if any.

        Returns:
            The result payload.

        Raises:
            ClientStateError: If called before initialize().
            JsonRpcError: If the server answers with an error object.
            TransportError: If the stream fails or closes.
        """
        self._require_initialized()
        response = self._exchange(method, params, result_type)
        if response.error is not None:
            raise JsonRpcError(
                response.error.code,
                response.error.message,
                response.error.data,
                request_id=response.id,
            )
        return response.result

    def notify(self, method: str, params: Any | None = None) -> None:
        """Send a notification (no response is expected)."""
        self._require_initialized()
        self._send(JsonRpcNotification(method=method, params=params))

    def list_tools(self, cursor: str | None = None) -> ToolsListResult:
        """List the server's tools."""
        return self.request("tools/list", ToolsListParams(cursor=cursor), ToolsListResult)

    def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Call a tool by name.

        Tool failures come back as a ToolResult with is_error set, not as
        an exception.
        """
        return self.request(
            "tools/call", ToolsCallParams(name=name, arguments=arguments or {}), ToolResult
        )

    def add(self, a: int, b: int) -> int:
        """Call the add demo method."""
        return self.request("add", AddParams(a=a, b=b))

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise ClientStateError("Client is not initialized; call initialize() first")

    def _exchange(
        self, method: str, params: Any | None, result_type: type[ParamsType] | None
    ) -> JsonRpcResponse:
        msg_id = self._next_id
        self._next_id += 1
        self._send(JsonRpcRequest(id=msg_id, method=method, params=params))

        body = self._transport.read_frame()
        if body is None:
            raise TransportError("Server closed the connection")

        response = decode_response(body, result_type)
        # Errors raised before the server could read the id (parse errors)
        # come back with a null id
        if response.id != msg_id and not (response.is_error and response.id is None):
            raise JsonRpcError(
                INVALID_REQUEST,
                f"Response id {response.id} does not match request id {msg_id}",
            )
        return response

    def _send(self, envelope: JsonRpcRequest | JsonRpcNotification) -> None:
        self._transport.write_frame(encode(envelope))
