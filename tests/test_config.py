"""Tests for ClientConfig and ConfigLoader."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from mcplink.config import DEFAULT_TIMEOUT, ClientConfig, ConfigLoader, LinkSettings
from mcplink.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

_VALID_YAML = """\
servers:
  zapier:
    url: https://actions.example.com/mcp/${ZAPIER_KEY}/sse
    timeout: 15
  local:
    url: http://localhost:8000/mcp
    headers:
      Authorization: Bearer token
telemetry:
  enabled: true
"""


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig(url="https://mcp.example.com")
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.protocol_version == "2025-06-18"
        assert config.client_name == "mcplink"
        assert config.headers == {}

    def test_rejects_non_http_url(self) -> None:
        with pytest.raises(ValidationError, match="http"):
            ClientConfig(url="ws://mcp.example.com")

    def test_rejects_url_without_host(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(url="https://")

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(url="https://mcp.example.com", timeout=0)


class TestLinkSettingsResolve:
    def test_named_server(self) -> None:
        settings = LinkSettings(servers={"a": ClientConfig(url="http://a.test/mcp", timeout=3)})
        assert settings.resolve("a").timeout == 3

    def test_url(self) -> None:
        assert LinkSettings().resolve("http://b.test/mcp").url == "http://b.test/mcp"

    def test_timeout_override(self) -> None:
        settings = LinkSettings(servers={"a": ClientConfig(url="http://a.test/mcp", timeout=3)})
        assert settings.resolve("a", timeout=9).timeout == 9
        assert settings.servers["a"].timeout == 3

    def test_unknown_name(self) -> None:
        with pytest.raises(ConfigError, match="Unknown server"):
            LinkSettings().resolve("nowhere")


class TestConfigLoader:
    def test_load_valid(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ZAPIER_KEY", "k-123")
        f = tmp_path / "mcplink.yaml"
        f.write_text(_VALID_YAML)
        settings = ConfigLoader(f).load()
        assert settings.servers["zapier"].url == "https://actions.example.com/mcp/k-123/sse"
        assert settings.servers["zapier"].timeout == 15
        assert settings.servers["local"].headers == {"Authorization": "Bearer token"}
        assert settings.telemetry is not None
        assert settings.telemetry.enabled is True

    def test_empty_file(self, tmp_path: Path) -> None:
        f = tmp_path / "empty.yaml"
        f.write_text("")
        assert ConfigLoader(f).load() == LinkSettings()

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            ConfigLoader(tmp_path / "missing.yaml").load()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "bad.yaml"
        f.write_text("{{{{invalid")
        with pytest.raises(ConfigError, match="YAML parse error"):
            ConfigLoader(f).load()

    def test_yaml_not_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- item1\n- item2\n")
        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader(f).load()

    def test_validation_error(self, tmp_path: Path) -> None:
        f = tmp_path / "bad-url.yaml"
        f.write_text("servers:\n  x:\n    url: ftp://nope\n")
        with pytest.raises(ConfigError, match="http"):
            ConfigLoader(f).load()
