"""Client configuration and the YAML server registry."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from mcplink import __version__
from mcplink.errors import ConfigError
from mcplink.session import DEFAULT_PROTOCOL_VERSION

DEFAULT_TIMEOUT = 30.0


class ClientConfig(BaseModel):
    """Connection settings for one MCP server.

    ``timeout`` is the per-exchange deadline in seconds.  ``headers`` are
    sent with every request (e.g. ``Authorization``).
    """

    url: str
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    protocol_version: str = DEFAULT_PROTOCOL_VERSION
    client_name: str = "mcplink"
    client_version: str = __version__
    headers: dict[str, str] = {}

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not is_valid_url(value):
            msg = f"MCP server url must be http(s): {value!r}"
            raise ValueError(msg)
        return value


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class LinkSettings(BaseModel):
    """Top-level config file: named servers plus telemetry.

    Example YAML::

        servers:
          zapier:
            url: https://actions.zapier.com/mcp/${ZAPIER_KEY}/sse
            timeout: 15
          local:
            url: http://localhost:8000/mcp
            headers:
              Authorization: Bearer ${LOCAL_TOKEN}
        telemetry:
          enabled: true
    """

    servers: dict[str, ClientConfig] = {}
    telemetry: TelemetrySettings | None = None

    def resolve(self, target: str, *, timeout: float | None = None) -> ClientConfig:
        """Return the config for a server name, or build one from a URL."""
        config = self.servers.get(target)
        if config is None:
            if not is_valid_url(target):
                raise ConfigError(f"Unknown server {target!r} (not a configured name or http(s) URL)")
            config = ClientConfig(url=target)
        if timeout is not None:
            config = config.model_copy(update={"timeout": timeout})
        return config


class ConfigLoader:
    """Load and validate a YAML config file into :class:`LinkSettings`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> LinkSettings:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.

        Raises:
            ConfigError: On unreadable files, YAML errors or validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            return LinkSettings()
        if not isinstance(data, dict):
            raise ConfigError("Config YAML must be a mapping")

        try:
            return LinkSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
