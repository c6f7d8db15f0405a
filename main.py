#!/usr/bin/env python3
"""mcp-lite example server - main entry point.

Serves the greet and get_time tools plus the add method over framed
stdin/stdout. Diagnostics are written to stderr.

================================================================================
DEVELOPER GUIDE: Registering New Tools
================================================================================

1. CREATE YOUR TOOL
   Add a module under src/mcp_lite/plugins/ with a class implementing the
   Tool interface (definition() and call()). See src/mcp_lite/plugins/greet.py.

2. REGISTER THE TOOL HERE
   Call server.register_tool(MyTool()) in build_server(). Registration must
   happen before serve() starts; duplicate names fail at startup.

3. APPLICATION METHODS
   Methods that are not tools (like add) are registered with
   server.register_method(name, handler, params_type). The params type's
   from_dict() performs the structural checks; failures are answered with
   -32602 automatically.

Tool failures never break the session: any exception raised by call() is
returned to the client as a result with isError set.
================================================================================
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from mcp_lite import __version__
from mcp_lite.config import ServerConfig, load_config
from mcp_lite.errors import ConfigLoadError, TransportError
from mcp_lite.plugins import ADD_METHOD, GetTimeTool, GreetTool, add
from mcp_lite.protocol.transport import FramedTransport
from mcp_lite.protocol.types import AddParams
from mcp_lite.server import MCPServer


def build_server(config: ServerConfig, log: Callable[[str], None] | None = None) -> MCPServer:
    """Create the example server with its tools and methods registered.

    Args:
        config: Server configuration.
        log: Diagnostic log sink.

    Returns:
        Server ready to serve.
    """
    server = MCPServer(config=config, log=log)
    server.register_tool(GreetTool())
    server.register_tool(GetTimeTool())
    server.register_method(ADD_METHOD, add, AddParams)
    return server


def main(argv: list[str] | None = None) -> int:
    """Run the MCP server.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        description="mcp-lite example server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to server configuration YAML file (defaults are used when omitted)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"mcp-lite {__version__}",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else ServerConfig()
    except ConfigLoadError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    transport = FramedTransport(max_frame_size=config.max_frame_size)

    with build_server(config, log=transport.log) as server:
        transport.log("mcp-lite server started")
        if args.config:
            transport.log(f"Config loaded from: {args.config}")

        try:
            server.serve(transport)
        except KeyboardInterrupt:
            transport.log("Interrupted, shutting down")
            return 130  # Standard exit code for SIGINT
        except TransportError:
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
