"""MCP server builder for routed resources.

This module creates a `FastMCP <https://pypi.org/project/mcp/>`_ server
that serves the resources of a :class:`~resourceroutes_core.ResourceRouter`.

Tools
-----

==============================  =============================================
Tool name                       Description
==============================  =============================================
``read_resource``               Read any resource by its concrete URI.
``list_resource_templates``     List URI templates with their parameters.
==============================  =============================================

Resources
---------

==========================================  ==============================================
URI                                         Description
==========================================  ==============================================
``routes://catalog/xml``                    XML catalog of all resource templates.
``routes://catalog/markdown``               Markdown catalog of all resource templates.
*each parameter-free template*              Served natively, read through the router.
==========================================  ==============================================

Templated resources (``users://[userId]/profile``) are reached through
``read_resource`` with a concrete URI, so matching always goes through
the router and its most-specific-wins rule.

Example::

    from resourceroutes_mcp import create_mcp_server

    server = create_mcp_server(router, name="My Resources")
    server.run()  # stdio by default
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from resourceroutes_core import (
    RegistrationError,
    ResourceDefinition,
    ResourceHandler,
    ResourceRouter,
    TextResourceHandler,
)
from resourceroutes_fs import FileResourceHandler, LocalFileSystemResourceSource
from resourceroutes_http import HTTPResourceHandler
from resourceroutes_mcp.config import ServerConfig

_logger = logging.getLogger(__name__)

CATALOG_XML_URI = "routes://catalog/xml"
CATALOG_MARKDOWN_URI = "routes://catalog/markdown"

# ------------------------------------------------------------------
# Handler resolution
# ------------------------------------------------------------------

#: Provider types that are recognized by :func:`_resolve_handler`.
SUPPORTED_PROVIDERS: frozenset[str] = frozenset({"file", "http", "text"})


def _resolve_handler(
    provider_type: str,
    options: dict[str, Any],
    *,
    base_dir: Path,
) -> ResourceHandler:
    """Map a provider type string and options to a concrete handler.

    Args:
        provider_type: One of the :data:`SUPPORTED_PROVIDERS` keys.
        options: Keyword arguments for the handler.  Unknown keys are
            ignored.
        base_dir: Directory relative ``file`` paths are resolved against.

    Raises:
        ValueError: If *provider_type* is not recognized or a required
            option is missing.
    """
    if provider_type == "text":
        if "text" not in options:
            raise ValueError("Provider 'text' requires a 'text' option")
        return TextResourceHandler(str(options["text"]), metadata=options.get("metadata"))

    if provider_type == "file":
        if "file" not in options:
            raise ValueError("Provider 'file' requires a 'file' option")
        return FileResourceHandler(base_dir / options["file"])

    if provider_type == "http":
        if "url" not in options:
            raise ValueError("Provider 'http' requires a 'url' option")
        # Only pass constructor-safe keys; runtime objects like
        # ``client`` cannot come from a config file.
        safe_http_keys = {"url", "headers", "params", "require_tls", "metadata"}
        filtered = {k: v for k, v in options.items() if k in safe_http_keys}
        return HTTPResourceHandler(**filtered)

    raise ValueError(
        f"Unknown provider type: {provider_type!r}. "
        f"Supported types: {', '.join(sorted(SUPPORTED_PROVIDERS))}"
    )


def build_router(
    config: ServerConfig,
    *,
    base_dir: Path = Path("."),
) -> tuple[ResourceRouter, list[RegistrationError]]:
    """Build a router from a :class:`~resourceroutes_mcp.config.ServerConfig`.

    Roots are scanned first, in config order, then inline resources are
    added.  Entries rejected by the registry are reported, not fatal.

    Args:
        config: The validated server configuration.
        base_dir: Directory relative paths in *config* are resolved
            against, usually the directory of the config file.

    Returns:
        The router with its table published, and the registration
        errors of rejected entries.

    Raises:
        NotADirectoryError: If a root does not exist.
        ValueError: If an inline resource has an unknown provider or
            missing options.
    """
    entries: list[tuple[Sequence[str] | str, ResourceHandler]] = []
    for root in config.roots:
        kwargs = {"extensions": root.extensions} if root.extensions is not None else {}
        source = LocalFileSystemResourceSource(base_dir / root.path, **kwargs)
        entries.extend(source.discover())
    for resource in config.resources:
        handler = _resolve_handler(resource.provider, resource.options, base_dir=base_dir)
        entries.append((resource.path, handler))

    router = ResourceRouter()
    errors = router.rebuild(entries)
    return router, errors


# ------------------------------------------------------------------
# Server builder
# ------------------------------------------------------------------


def create_mcp_server(
    router: ResourceRouter,
    *,
    name: str,
    instructions: str | None = None,
) -> FastMCP:
    """Build an MCP server that serves a router's resources.

    The returned :class:`~mcp.server.fastmcp.FastMCP` server is
    transport-agnostic.  Call ``server.run()`` to start with the
    default stdio transport, or ``server.run(transport="streamable-http")``
    for HTTP.

    Tools and catalog resources always read the table currently
    published on *router*, so a later :meth:`ResourceRouter.rebuild
    <resourceroutes_core.ResourceRouter.rebuild>` is picked up without
    recreating the server.  Native resources are registered for the
    parameter-free templates present when the server is built.

    Args:
        router: The :class:`~resourceroutes_core.ResourceRouter` whose
            resources should be exposed via MCP.
        name: Display name for the MCP server.  Required.
        instructions: Optional server-level instructions sent to the
            MCP client during initialization.

    Returns:
        A configured :class:`~mcp.server.fastmcp.FastMCP` server
        instance, ready for ``server.run()``.
    """
    mcp = FastMCP(name, instructions=instructions)

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    @mcp.tool()
    async def read_resource(uri: str) -> str:
        """Read a resource by its concrete URI, e.g. users://42/profile.

        Use list_resource_templates to see which URIs exist; replace each
        [param] in a template with a concrete value.
        """
        match = router.match(uri)
        return await match.handler.read(match.params)

    @mcp.tool()
    async def list_resource_templates() -> str:
        """List every resource URI template with its parameters and description."""
        templates = []
        for definition in router.table.definitions:
            meta = await definition.handler.get_metadata()
            templates.append(
                {
                    "uriTemplate": definition.uri_template,
                    "params": list(definition.param_names),
                    "name": meta.get("name", definition.file_path[-1]),
                    "description": meta.get("description", ""),
                }
            )
        return json.dumps(templates)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    @mcp.resource(CATALOG_XML_URI)
    async def routes_catalog_xml() -> str:
        """XML catalog of all resource templates for system-prompt injection."""
        return await router.table.get_catalog(format="xml")

    @mcp.resource(CATALOG_MARKDOWN_URI)
    async def routes_catalog_markdown() -> str:
        """Markdown catalog of all resource templates for system-prompt injection."""
        return await router.table.get_catalog(format="markdown")

    for definition in router.table.definitions:
        if not definition.param_names:
            _add_static_resource(mcp, router, definition)

    return mcp


def _add_static_resource(
    mcp: FastMCP,
    router: ResourceRouter,
    definition: ResourceDefinition,
) -> None:
    """Expose a parameter-free definition as a native MCP resource.

    Definitions that shadow a catalog URI, or whose template MCP does not
    accept as a URL (``notes://hello world``), are skipped with a warning.
    They stay readable through the ``read_resource`` tool.
    """
    uri = definition.uri_template
    if uri in (CATALOG_XML_URI, CATALOG_MARKDOWN_URI):
        _logger.warning(
            "Resource %s shadows a built-in catalog resource; "
            "it is only served through read_resource",
            uri,
        )
        return

    async def read_static_resource() -> str:
        match = router.match(uri)
        return await match.handler.read(match.params)

    try:
        mcp.resource(uri, name=uri)(read_static_resource)
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError
        _logger.warning(
            "Resource %s is not a valid MCP resource URI; "
            "it is only served through read_resource: %s",
            uri,
            exc,
        )
