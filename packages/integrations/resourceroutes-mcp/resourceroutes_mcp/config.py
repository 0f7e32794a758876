"""Pydantic configuration models for resource-routing MCP servers.

This module defines the declarative configuration schema used by the
CLI (``python -m resourceroutes_mcp --config server.json``).

Resources come from two places, which may be combined:

* ``roots`` -- directories scanned with
  :class:`~resourceroutes_fs.LocalFileSystemResourceSource`; every file
  becomes a resource addressed by its path.
* ``resources`` -- single resources declared inline, each with a path
  (``"(docs)/[page]"``) and a handler provider.

String values may contain ``${VAR}`` or ``${VAR:-default}`` placeholders
that are resolved from environment variables at load time.

Example config (JSON)::

    {
        "name": "Docs Server",
        "roots": [{"path": "./resources"}],
        "resources": [
            {
                "path": "(docs)/[page]",
                "provider": "http",
                "options": {
                    "url": "https://cdn.example.com/docs/{page}.md",
                    "headers": {"Authorization": "Bearer ${API_TOKEN}"}
                }
            },
            {
                "path": "(config)/motd",
                "provider": "text",
                "options": {"text": "Welcome, ${USER:-guest}!"}
            }
        ]
    }
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

_logger = logging.getLogger(__name__)


class RootConfig(BaseModel):
    """A directory of resource files."""

    path: str = Field(..., description="Resources directory, relative to the config file")
    extensions: list[str] | None = Field(
        None,
        description="File extensions to include (default: .md, .txt, .json)",
    )


class ResourceConfig(BaseModel):
    """A single resource declared in the config file."""

    path: str = Field(..., description="Resource path, e.g. '(users)/[userId]/profile'")
    provider: str = Field(..., description="Handler type ('file', 'http' or 'text')")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific options passed to the handler constructor",
    )


class ServerConfig(BaseModel):
    """Top-level configuration for a resource-routing MCP server.

    Attributes:
        name: Display name shown to MCP clients during initialization.
        instructions: Optional server-level instructions sent to the
            client during the MCP handshake.
        roots: Directories scanned for resource files.
        resources: Resources declared inline.
    """

    name: str = Field(..., description="Display name for the MCP server")
    instructions: str | None = Field(None, description="Optional server-level instructions")
    roots: list[RootConfig] = Field(default_factory=list, description="Resource directories")
    resources: list[ResourceConfig] = Field(
        default_factory=list, description="Inline resource declarations"
    )

    @model_validator(mode="after")
    def _require_resources(self) -> ServerConfig:
        if not self.roots and not self.resources:
            raise ValueError("at least one entry in 'roots' or 'resources' is required")
        return self


def load_config(path: Path) -> ServerConfig:
    """Load, resolve and validate a JSON or YAML config file.

    Files ending in ``.yaml`` or ``.yml`` are parsed as YAML; anything
    else as JSON.

    Raises:
        FileNotFoundError: If *path* does not exist.
        pydantic.ValidationError: If the content does not match
            :class:`ServerConfig`.
    """
    raw = Path(path).read_text(encoding="utf-8")
    if Path(path).suffix in (".yaml", ".yml"):
        data = yaml.safe_load(raw)
    else:
        data = json.loads(raw)
    return ServerConfig.model_validate(resolve_env_vars(data))


# ------------------------------------------------------------------
# Environment variable resolution
# ------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def resolve_env_vars(data: Any) -> Any:
    """Recursively resolve ``${VAR}`` placeholders in config data.

    Walks dicts, lists, and strings.  Other values are returned as-is.
    ``${VAR:-default}`` falls back to *default* when ``VAR`` is unset or
    empty.  An unset variable without a default resolves to an empty
    string and logs a warning.
    """
    if isinstance(data, str):
        return _ENV_VAR_RE.sub(_replace_env_var, data)
    if isinstance(data, dict):
        return {k: resolve_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [resolve_env_vars(item) for item in data]
    return data


def _replace_env_var(match: re.Match[str]) -> str:
    var_name, default = match.group(1), match.group(2)
    value = os.environ.get(var_name, "")
    if value:
        return value
    if default is not None:
        return default
    _logger.warning("Environment variable '%s' is not set or empty", var_name)
    return ""
