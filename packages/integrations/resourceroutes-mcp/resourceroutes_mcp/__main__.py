"""Run a resource-routing MCP server from a config file.

Usage::

    python -m resourceroutes_mcp --config server.json
    python -m resourceroutes_mcp --config server.yaml
    python -m resourceroutes_mcp --config server.json --transport streamable-http

The config file is a JSON or YAML document conforming to
:class:`~resourceroutes_mcp.config.ServerConfig`.  Relative paths in it
are resolved against the directory containing the config file.

Example ``server.json``::

    {
        "name": "Docs Server",
        "roots": [{"path": "./resources"}]
    }

Resource files that cannot be registered (bad parameter names,
duplicate URIs) are reported and skipped; the server still starts with
the remaining resources.

MCP client integration (stdio transport)::

    {
        "command": "python",
        "args": ["-m", "resourceroutes_mcp", "--config", "server.json"]
    }
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from resourceroutes_mcp.config import load_config
from resourceroutes_mcp.server import build_router, create_mcp_server

_logger = logging.getLogger("resourceroutes_mcp")


def main() -> None:
    """Parse CLI arguments, load config, and start the MCP server."""
    parser = argparse.ArgumentParser(
        prog="resourceroutes_mcp",
        description="Start a resource-routing MCP server from a config file.",
    )
    parser.add_argument(
        "--config",
        required=True,
        type=Path,
        help="Path to a JSON or YAML configuration file.",
    )
    parser.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "streamable-http"],
        help="MCP transport type (default: stdio).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level, written to stderr (default: WARNING).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path: Path = args.config
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config(config_path)
    except (ValidationError, ValueError, yaml.YAMLError) as exc:
        # ValueError covers json.JSONDecodeError and UnicodeDecodeError
        print(f"Error: invalid config file {config_path}:\n{exc}", file=sys.stderr)
        sys.exit(1)

    try:
        router, errors = build_router(config, base_dir=config_path.parent)
    except (NotADirectoryError, ValueError) as exc:
        print(f"Error: cannot build resources from {config_path}: {exc}", file=sys.stderr)
        sys.exit(1)
    for error in errors:
        print(f"Warning: skipped resource: {error}", file=sys.stderr)
    if not len(router.table):
        print("Error: no resources could be registered", file=sys.stderr)
        sys.exit(1)

    _logger.info("Serving %d resources as %r", len(router.table), config.name)
    server = create_mcp_server(router, name=config.name, instructions=config.instructions)
    server.run(transport=args.transport)


if __name__ == "__main__":
    main()
