"""mcp-lite: a minimal framed MCP client and server."""

from mcp_lite.client import MCPClient
from mcp_lite.config import ServerConfig, load_config
from mcp_lite.protocol.transport import FramedTransport
from mcp_lite.server import MCPServer, MessageOutcome

__version__ = "1.0.0"

__all__ = [
    "FramedTransport",
    "MCPClient",
    "MCPServer",
    "MessageOutcome",
    "ServerConfig",
    "load_config",
]
