"""MCP server integration for routed resources.

This package bridges :mod:`resourceroutes_core` and the `Model Context
Protocol <https://modelcontextprotocol.io>`_, providing:

* :func:`create_mcp_server` -- builds a FastMCP server from a
  :class:`~resourceroutes_core.ResourceRouter`.
* :func:`build_router` -- builds a router from a
  :class:`~resourceroutes_mcp.config.ServerConfig`.
* CLI entry-point (``python -m resourceroutes_mcp --config server.json``)
  for zero-code server startup.

Quick start (programmatic)::

    from resourceroutes_core import ResourceRouter
    from resourceroutes_fs import LocalFileSystemResourceSource
    from resourceroutes_mcp import create_mcp_server

    router = ResourceRouter()
    router.rebuild(LocalFileSystemResourceSource(Path("./resources")).discover())
    server = create_mcp_server(router, name="My Resources")
    server.run()  # stdio by default

Install::

    pip install resourceroutes
"""

from resourceroutes_mcp.config import ServerConfig, load_config
from resourceroutes_mcp.server import build_router, create_mcp_server

__all__ = [
    "ServerConfig",
    "build_router",
    "create_mcp_server",
    "load_config",
]
