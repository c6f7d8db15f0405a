"""Tests for the server configuration loader."""

import os
from pathlib import Path

import pytest
import yaml

from mcp_lite.config import DEFAULT_INSTRUCTIONS, ServerConfig, expand_env_vars, load_config
from mcp_lite.errors import ConfigLoadError
from mcp_lite.protocol.lifecycle import MCP_PROTOCOL_VERSION
from mcp_lite.protocol.transport import MAX_FRAME_SIZE


class TestExpandEnvVars:
    """Tests for environment variable expansion."""

    def test_expands_home_variable(self, monkeypatch):
        """Should expand ${HOME} to actual home directory."""
        monkeypatch.delenv("HOME", raising=False)
        result = expand_env_vars("${HOME}/projects")
        assert result == os.path.expanduser("~") + "/projects"

    def test_expands_custom_variable(self, monkeypatch):
        monkeypatch.setenv("TEST_MCP_VAR", "/custom/path")

        assert expand_env_vars("${TEST_MCP_VAR}/subdir") == "/custom/path/subdir"

    def test_leaves_unknown_variables_unchanged(self):
        """Should leave unknown variables as-is."""
        result = expand_env_vars("${UNKNOWN_VAR_12345}/path")
        assert result == "${UNKNOWN_VAR_12345}/path"

    def test_handles_no_variables(self):
        assert expand_env_vars("/simple/path") == "/simple/path"


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    def test_from_dict_minimal(self):
        """Should fall back to defaults for every section."""
        config = ServerConfig.from_dict({"version": "1.0"})

        assert config == ServerConfig()
        assert config.server_name == "ExampleServer"
        assert config.instructions == DEFAULT_INSTRUCTIONS
        assert config.protocol_version == MCP_PROTOCOL_VERSION
        assert config.max_frame_size == MAX_FRAME_SIZE
        assert config.audit_log_file == ""

    def test_from_dict_full(self, monkeypatch):
        monkeypatch.setenv("MCP_LITE_LOGS", "/var/log/mcp")
        config = ServerConfig.from_dict(
            {
                "version": "1.0",
                "server": {"name": "calc", "version": 2, "instructions": None},
                "protocol": {"version": "2024-11-05"},
                "transport": {"max_frame_size": 4096},
                "audit": {"log_file": "${MCP_LITE_LOGS}/audit.jsonl"},
            }
        )

        assert config.server_name == "calc"
        assert config.server_version == "2"
        assert config.instructions is None
        assert config.protocol_version == "2024-11-05"
        assert config.max_frame_size == 4096
        assert config.audit_log_file == "/var/log/mcp/audit.jsonl"

    def test_rejects_non_mapping_section(self):
        with pytest.raises(ConfigLoadError, match="'server' must be a mapping"):
            ServerConfig.from_dict({"version": "1.0", "server": ["x"]})

    @pytest.mark.parametrize("size", [0, -1, "big", True])
    def test_rejects_invalid_frame_size(self, size):
        with pytest.raises(ConfigLoadError, match="max_frame_size"):
            ServerConfig.from_dict({"version": "1.0", "transport": {"max_frame_size": size}})


class TestLoadConfig:
    """Tests for loading configuration from YAML files."""

    def test_loads_valid_yaml(self, tmp_path: Path):
        path = tmp_path / "server.yaml"
        path.write_text(yaml.dump({"version": "1.0", "server": {"name": "from-file"}}))

        config = load_config(path)

        assert config.version == "1.0"
        assert config.server_name == "from-file"

    def test_loads_bundled_example(self):
        config = load_config(Path(__file__).parent.parent / "config" / "server.yaml")

        assert config.protocol_version == MCP_PROTOCOL_VERSION
        assert config.audit_log_file.endswith("/.mcp-lite/audit.jsonl")

    def test_raises_on_missing_file(self):
        with pytest.raises(ConfigLoadError, match="not found"):
            load_config(Path("/nonexistent/server.yaml"))

    def test_raises_on_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "server.yaml"
        path.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigLoadError, match="parse"):
            load_config(path)

    def test_raises_on_non_mapping(self, tmp_path: Path):
        path = tmp_path / "server.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(path)

    def test_raises_on_missing_version(self, tmp_path: Path):
        path = tmp_path / "server.yaml"
        path.write_text(yaml.dump({"server": {}}))

        with pytest.raises(ConfigLoadError, match="version"):
            load_config(path)
