"""JSON-RPC 2.0 envelope codec.

Decoding is two-phase. ``decode_generic`` performs a loose parse that only
recovers the method name and request id. ``decode_typed`` then parses
``params`` against the shape a method expects. A failure in the second phase
is an invalid-params protocol error, never a transport error.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Protocol

from mcp_lite.errors import ProtocolError

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# MCP server error codes
SERVER_NOT_INITIALIZED = -32002


class JsonRpcError(ProtocolError):
    """JSON-RPC error with code and message."""

    def __init__(
        self,
        code: int,
        message: str,
        data: Any | None = None,
        request_id: int | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
            request_id: Id of the request the error answers, if known.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data
        self.request_id = request_id

    def to_error_object(self) -> ErrorObject:
        return ErrorObject(code=self.code, message=self.message, data=self.data)


class ParamsType(Protocol):
    """Structural type accepted by decode_typed."""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Any: ...


@dataclass
class ErrorObject:
    """Error member of a JSON-RPC response."""

    code: int
    message: str
    data: Any | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ErrorObject:
        code = data.get("code")
        message = data.get("message")
        if isinstance(code, bool) or not isinstance(code, int) or not isinstance(message, str):
            raise JsonRpcError(INVALID_REQUEST, "Invalid Response: malformed error object")
        return cls(code=code, message=message, data=data.get("data"))

    def to_dict(self) -> dict[str, Any]:
        error_obj: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error_obj["data"] = self.data
        return error_obj


@dataclass
class JsonRpcRequest:
    """Represents a JSON-RPC request (has id)."""

    id: int
    method: str
    params: Any | None = None

    def to_dict(self) -> dict[str, Any]:
        request: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": self.method}
        if self.params is not None:
            request["params"] = _to_json(self.params)
        request["id"] = self.id
        return request


@dataclass
class JsonRpcNotification:
    """Represents a JSON-RPC notification (no id)."""

    method: str
    params: Any | None = None

    def to_dict(self) -> dict[str, Any]:
        notification: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": self.method}
        if self.params is not None:
            notification["params"] = _to_json(self.params)
        return notification


@dataclass
class JsonRpcResponse:
    """Represents a JSON-RPC response.

    A response carries a result or an error, never both. A ``None``
    result is encoded as JSON null.
    """

    id: int | None
    result: Any | None = None
    error: ErrorObject | None = None

    def __post_init__(self) -> None:
        if self.result is not None and self.error is not None:
            raise ValueError("A response cannot carry both result and error")

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        response: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION}
        if self.error is not None:
            response["error"] = self.error.to_dict()
        else:
            response["result"] = _to_json(self.result)
        response["id"] = self.id
        return response


Envelope = JsonRpcRequest | JsonRpcNotification | JsonRpcResponse


@dataclass
class RawMessage:
    """Result of the loose first decoding phase."""

    method: str | None
    id: int | None
    payload: dict[str, Any]

    @property
    def is_notification(self) -> bool:
        """Messages without an id are notifications."""
        return self.id is None


def _to_json(value: Any) -> Any:
    """Convert typed values to plain JSON values."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return value


def _loads(body: bytes | str) -> Any:
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise JsonRpcError(PARSE_ERROR, f"Parse error: {e}") from e


def _parse_id(data: dict[str, Any]) -> int | None:
    msg_id = data.get("id")
    if msg_id is None:
        return None
    if isinstance(msg_id, bool) or not isinstance(msg_id, int) or msg_id < 0:
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: id must be a non-negative integer"
        )
    return msg_id


def decode_generic(body: bytes | str) -> RawMessage:
    """Recover method and id from a message without interpreting params.

    Args:
        body: Raw frame body.

    Returns:
        RawMessage with the method (None if absent), id (None for
        notifications) and the full decoded object.

    Raises:
        JsonRpcError: If the body is not JSON, not an object, or carries an
            invalid id, method or version.
    """
    data = _loads(body)

    # Must be an object
    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: message must be an object")

    msg_id = _parse_id(data)

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'", request_id=msg_id
        )

    method = data.get("method")
    if method is not None and not isinstance(method, str):
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: method must be a string", request_id=msg_id
        )

    return RawMessage(method=method, id=msg_id, payload=data)


def decode_typed(
    raw: RawMessage, params_type: type[ParamsType] | None = None
) -> JsonRpcRequest | JsonRpcNotification:
    """Parse the params of a generically decoded message.

    Args:
        raw: Output of decode_generic.
        params_type: Type whose ``from_dict`` builds the params, or None
            when the method takes no typed params.

    Returns:
        Typed request or notification.

    Raises:
        JsonRpcError: INVALID_REQUEST if the method is missing,
            INVALID_PARAMS if params do not have the expected shape.
    """
    if raw.method is None:
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: method must be a string", request_id=raw.id
        )

    params = raw.payload.get("params")
    if params is not None and not isinstance(params, dict):
        raise JsonRpcError(
            INVALID_PARAMS, "Invalid params: params must be an object", request_id=raw.id
        )

    typed: Any = params
    if params_type is not None:
        try:
            typed = params_type.from_dict(params or {})
        except (ValueError, TypeError) as e:
            raise JsonRpcError(
                INVALID_PARAMS,
                f"Invalid params for '{raw.method}': {e}",
                request_id=raw.id,
            ) from e

    if raw.is_notification:
        return JsonRpcNotification(method=raw.method, params=typed)
    return JsonRpcRequest(id=raw.id, method=raw.method, params=typed)


def decode_response(
    body: bytes | str, result_type: type[ParamsType] | None = None
) -> JsonRpcResponse:
    """Parse a JSON-RPC response.

    Args:
        body: Raw frame body.
        result_type: Type whose ``from_dict`` builds the result, if any.

    Returns:
        Parsed response.

    Raises:
        JsonRpcError: If the body is not a well-formed response.
    """
    data = _loads(body)
    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Response: message must be an object")

    msg_id = _parse_id(data)
    has_result = "result" in data
    has_error = "error" in data
    if has_result == has_error:
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Response: exactly one of result or error is required"
        )

    if has_error:
        error = data["error"]
        if not isinstance(error, dict):
            raise JsonRpcError(INVALID_REQUEST, "Invalid Response: error must be an object")
        return JsonRpcResponse(id=msg_id, error=ErrorObject.from_dict(error))

    result = data["result"]
    if result_type is not None:
        if not isinstance(result, dict):
            raise JsonRpcError(INVALID_REQUEST, "Invalid Response: result must be an object")
        try:
            result = result_type.from_dict(result)
        except (ValueError, TypeError) as e:
            raise JsonRpcError(INVALID_REQUEST, f"Malformed result: {e}") from e
    return JsonRpcResponse(id=msg_id, result=result)


def encode(envelope: Envelope) -> bytes:
    """Serialize an envelope to a UTF-8 JSON frame body.

    Args:
        envelope: Request, notification or response.

    Returns:
        Encoded body.
    """
    return json.dumps(envelope.to_dict(), separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )


def format_response(msg_id: int | None, result: Any) -> bytes:
    """Format a successful JSON-RPC response.

    Args:
        msg_id: Request ID to echo back.
        result: Result payload.

    Returns:
        Encoded body.
    """
    return encode(JsonRpcResponse(id=msg_id, result=result))


def format_error(
    msg_id: int | None,
    code: int,
    message: str,
    data: Any | None = None,
) -> bytes:
    """Format a JSON-RPC error response.

    Args:
        msg_id: Request ID (or None for parse errors).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        Encoded body.
    """
    return encode(JsonRpcResponse(id=msg_id, error=ErrorObject(code, message, data)))


def format_request(msg_id: int, method: str, params: Any | None = None) -> bytes:
    """Format a JSON-RPC request."""
    return encode(JsonRpcRequest(id=msg_id, method=method, params=params))


def format_notification(method: str, params: Any | None = None) -> bytes:
    """Format a JSON-RPC notification.

    Args:
        method: Notification method name.
        params: Optional parameters.

    Returns:
        Encoded body.
    """
    return encode(JsonRpcNotification(method=method, params=params))
