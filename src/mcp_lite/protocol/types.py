"""Typed params and results for the reserved MCP methods.

Each type converts to and from the camelCase JSON shape used on the wire.
``from_dict`` performs structural checks only and raises ``ValueError``
with a descriptive message when a field is missing or has the wrong type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

JsonObject = dict[str, Any]


def _compact(data: JsonObject) -> JsonObject:
    """Drop keys whose value is None."""
    return {key: value for key, value in data.items() if value is not None}


def _require_object(value: Any, name: str) -> JsonObject:
    if not isinstance(value, dict):
        raise ValueError(f"'{name}' must be an object")
    return value


def _optional_object(data: JsonObject, key: str) -> JsonObject | None:
    value = data.get(key)
    if value is None:
        return None
    return _require_object(value, key)


def _require_str(data: JsonObject, key: str) -> str:
    value = data.get(key)
    if value is None:
        raise ValueError(f"Missing required field '{key}'")
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _optional_str(data: JsonObject, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _optional_bool(data: JsonObject, key: str) -> bool | None:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a boolean")
    return value


def _require_int(data: JsonObject, key: str) -> int:
    value = data.get(key)
    if value is None:
        raise ValueError(f"Missing required field '{key}'")
    # bool is a subclass of int but never a valid integer param
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer")
    return value


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


@dataclass
class ListChangedCapability:
    """Capability that only advertises list-change notifications."""

    list_changed: bool | None = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> ListChangedCapability:
        return cls(list_changed=_optional_bool(data, "listChanged"))

    def to_dict(self) -> JsonObject:
        return _compact({"listChanged": self.list_changed})


@dataclass
class ResourcesCapability:
    """Server resources capability."""

    subscribe: bool | None = None
    list_changed: bool | None = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> ResourcesCapability:
        return cls(
            subscribe=_optional_bool(data, "subscribe"),
            list_changed=_optional_bool(data, "listChanged"),
        )

    def to_dict(self) -> JsonObject:
        return _compact({"subscribe": self.subscribe, "listChanged": self.list_changed})


@dataclass
class ClientCapabilities:
    """Capabilities advertised by the client in initialize."""

    roots: ListChangedCapability | None = None
    sampling: JsonObject | None = None
    experimental: JsonObject | None = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> ClientCapabilities:
        roots = _optional_object(data, "roots")
        return cls(
            roots=ListChangedCapability.from_dict(roots) if roots is not None else None,
            sampling=_optional_object(data, "sampling"),
            experimental=_optional_object(data, "experimental"),
        )

    def to_dict(self) -> JsonObject:
        return _compact(
            {
                "roots": self.roots.to_dict() if self.roots else None,
                "sampling": self.sampling,
                "experimental": self.experimental,
            }
        )


@dataclass
class ServerCapabilities:
    """Capabilities advertised by the server in the initialize result."""

    logging: JsonObject | None = None
    prompts: ListChangedCapability | None = None
    resources: ResourcesCapability | None = None
    tools: ListChangedCapability | None = None
    experimental: JsonObject | None = None

    @classmethod
    def default(cls) -> ServerCapabilities:
        """Capabilities advertised when none are configured."""
        return cls(
            logging={},
            prompts=ListChangedCapability(list_changed=True),
            resources=ResourcesCapability(subscribe=True, list_changed=True),
            tools=ListChangedCapability(list_changed=True),
        )

    @classmethod
    def from_dict(cls, data: JsonObject) -> ServerCapabilities:
        prompts = _optional_object(data, "prompts")
        resources = _optional_object(data, "resources")
        tools = _optional_object(data, "tools")
        return cls(
            logging=_optional_object(data, "logging"),
            prompts=ListChangedCapability.from_dict(prompts) if prompts is not None else None,
            resources=(
                ResourcesCapability.from_dict(resources) if resources is not None else None
            ),
            tools=ListChangedCapability.from_dict(tools) if tools is not None else None,
            experimental=_optional_object(data, "experimental"),
        )

    def to_dict(self) -> JsonObject:
        return _compact(
            {
                "logging": self.logging,
                "prompts": self.prompts.to_dict() if self.prompts else None,
                "resources": self.resources.to_dict() if self.resources else None,
                "tools": self.tools.to_dict() if self.tools else None,
                "experimental": self.experimental,
            }
        )


@dataclass
class Implementation:
    """Name and version of a client or server (clientInfo/serverInfo)."""

    name: str
    version: str

    @classmethod
    def from_dict(cls, data: JsonObject) -> Implementation:
        return cls(name=_require_str(data, "name"), version=_require_str(data, "version"))

    def to_dict(self) -> JsonObject:
        return {"name": self.name, "version": self.version}


# ---------------------------------------------------------------------------
# initialize
# ---------------------------------------------------------------------------


@dataclass
class InitializeParams:
    """Params of the initialize request."""

    protocol_version: str
    capabilities: ClientCapabilities
    client_info: Implementation

    @classmethod
    def from_dict(cls, data: JsonObject) -> InitializeParams:
        return cls(
            protocol_version=_require_str(data, "protocolVersion"),
            capabilities=ClientCapabilities.from_dict(
                _require_object(data.get("capabilities"), "capabilities")
            ),
            client_info=Implementation.from_dict(
                _require_object(data.get("clientInfo"), "clientInfo")
            ),
        )

    def to_dict(self) -> JsonObject:
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": self.capabilities.to_dict(),
            "clientInfo": self.client_info.to_dict(),
        }


@dataclass
class InitializeResult:
    """Result of the initialize request."""

    protocol_version: str
    capabilities: ServerCapabilities
    server_info: Implementation
    instructions: str | None = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> InitializeResult:
        return cls(
            protocol_version=_require_str(data, "protocolVersion"),
            capabilities=ServerCapabilities.from_dict(
                _require_object(data.get("capabilities"), "capabilities")
            ),
            server_info=Implementation.from_dict(
                _require_object(data.get("serverInfo"), "serverInfo")
            ),
            instructions=_optional_str(data, "instructions"),
        )

    def to_dict(self) -> JsonObject:
        return _compact(
            {
                "protocolVersion": self.protocol_version,
                "capabilities": self.capabilities.to_dict(),
                "serverInfo": self.server_info.to_dict(),
                "instructions": self.instructions,
            }
        )


# ---------------------------------------------------------------------------
# tools/list and tools/call
# ---------------------------------------------------------------------------


@dataclass
class ToolsListParams:
    """Params of the tools/list request."""

    cursor: str | None = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> ToolsListParams:
        return cls(cursor=_optional_str(data, "cursor"))

    def to_dict(self) -> JsonObject:
        return _compact({"cursor": self.cursor})


@dataclass
class ToolsListResult:
    """Result of tools/list request."""

    tools: list[JsonObject]
    next_cursor: str | None = None

    @classmethod
    def from_dict(cls, data: JsonObject) -> ToolsListResult:
        tools = data.get("tools")
        if not isinstance(tools, list) or not all(isinstance(t, dict) for t in tools):
            raise ValueError("'tools' must be a list of objects")
        return cls(tools=tools, next_cursor=_optional_str(data, "nextCursor"))

    def to_dict(self) -> JsonObject:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/list result format.
        """
        return _compact({"tools": self.tools, "nextCursor": self.next_cursor})


@dataclass
class ToolsCallParams:
    """Params of the tools/call request."""

    name: str
    arguments: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: JsonObject) -> ToolsCallParams:
        arguments = _optional_object(data, "arguments")
        return cls(name=_require_str(data, "name"), arguments=arguments or {})

    def to_dict(self) -> JsonObject:
        return {"name": self.name, "arguments": self.arguments}


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


@dataclass
class AddParams:
    """Params of the add demo method."""

    a: int
    b: int

    @classmethod
    def from_dict(cls, data: JsonObject) -> AddParams:
        return cls(a=_require_int(data, "a"), b=_require_int(data, "b"))

    def to_dict(self) -> JsonObject:
        return {"a": self.a, "b": self.b}
