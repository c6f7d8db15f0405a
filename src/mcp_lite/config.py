"""Server configuration loader.

Loads server identity, protocol and audit settings from a YAML file.
Every key is optional apart from ``version``; missing keys fall back to
the defaults below.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from mcp_lite.errors import ConfigLoadError
from mcp_lite.protocol.lifecycle import MCP_PROTOCOL_VERSION
from mcp_lite.protocol.transport import MAX_FRAME_SIZE

DEFAULT_INSTRUCTIONS = "Welcome! Send 'add' requests after initialization."


def expand_env_vars(value: str) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.

    Returns:
        String with known environment variables expanded.
    """
    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if var_name == "HOME":
            return os.path.expanduser("~")
        return match.group(0)

    return pattern.sub(replacer, value)


@dataclass
class ServerConfig:
    """Server configuration.

    Immutable once loaded; the server reads it only at construction time.
    """

    version: str = "1.0"

    # Identity advertised in the initialize result
    server_name: str = "ExampleServer"
    server_version: str = "1.0.0"
    instructions: str | None = DEFAULT_INSTRUCTIONS

    # Protocol settings
    protocol_version: str = MCP_PROTOCOL_VERSION
    max_frame_size: int = MAX_FRAME_SIZE

    # Audit settings
    audit_log_file: str = ""

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ServerConfig:
        """Create a ServerConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML configuration.

        Returns:
            ServerConfig instance with all settings populated.
        """
        server = config.get("server") or {}
        protocol = config.get("protocol") or {}
        transport = config.get("transport") or {}
        audit = config.get("audit") or {}

        for section, value in (
            ("server", server),
            ("protocol", protocol),
            ("transport", transport),
            ("audit", audit),
        ):
            if not isinstance(value, dict):
                raise ConfigLoadError(f"'{section}' must be a mapping")

        max_frame_size = transport.get("max_frame_size", MAX_FRAME_SIZE)
        if isinstance(max_frame_size, bool) or not isinstance(max_frame_size, int):
            raise ConfigLoadError("'transport.max_frame_size' must be an integer")
        if max_frame_size <= 0:
            raise ConfigLoadError("'transport.max_frame_size' must be positive")

        return cls(
            version=str(config.get("version", "")),
            server_name=str(server.get("name", "ExampleServer")),
            server_version=str(server.get("version", "1.0.0")),
            instructions=server.get("instructions", DEFAULT_INSTRUCTIONS),
            protocol_version=str(protocol.get("version", MCP_PROTOCOL_VERSION)),
            max_frame_size=max_frame_size,
            audit_log_file=expand_env_vars(audit.get("log_file", "") or ""),
        )


def load_config(path: Path) -> ServerConfig:
    """Load server configuration from a YAML file.

    Args:
        path: Path to the configuration YAML file.

    Returns:
        ServerConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be found, parsed, or validated.
    """
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse config YAML: {e}") from e

    if not isinstance(config, dict):
        raise ConfigLoadError("Config must be a YAML mapping")

    if "version" not in config:
        raise ConfigLoadError("Config must include 'version' field")

    return ServerConfig.from_dict(config)
