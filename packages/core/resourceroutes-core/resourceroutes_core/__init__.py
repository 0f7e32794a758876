"""Path-to-URI routing for MCP resources.

This package derives resource URIs from where resource files live and
routes request URIs back to their handlers:

* :func:`derive_definition` -- turns a file path such as
  ``(users)/[userId]/profile.md`` into a
  :class:`ResourceDefinition` for ``users://[userId]/profile``.
* :class:`ResourceRegistry` -- collects definitions and rejects
  duplicate or ambiguous templates.
* :class:`RouteTable` -- immutable snapshot that matches request URIs.
* :class:`ResourceRouter` -- holds the current table and swaps in
  rebuilt ones.
* :class:`ResourceHandler` -- capability interface for content handlers.
* :class:`ResourceRoutesError` -- base class for all library exceptions.

Install::

    pip install resourceroutes
"""

from resourceroutes_core.definition import MatchResult, ResourceDefinition, Segment
from resourceroutes_core.exceptions import (
    AmbiguousRouteError,
    DuplicateResourceError,
    EmptySchemeError,
    InvalidSegmentNameError,
    RegistrationError,
    ResourceNotFoundError,
    ResourceReadError,
    ResourceRoutesError,
)
from resourceroutes_core.handler import ResourceHandler, TextResourceHandler, render_placeholders
from resourceroutes_core.matcher import Matcher, compile_matcher
from resourceroutes_core.parsing import split_frontmatter, split_resource_path, split_resource_uri
from resourceroutes_core.registry import ResourceRegistry
from resourceroutes_core.router import ResourceRouter
from resourceroutes_core.table import RouteTable
from resourceroutes_core.template import derive_definition

__all__ = [
    "AmbiguousRouteError",
    "DuplicateResourceError",
    "EmptySchemeError",
    "InvalidSegmentNameError",
    "MatchResult",
    "Matcher",
    "RegistrationError",
    "ResourceDefinition",
    "ResourceHandler",
    "ResourceNotFoundError",
    "ResourceReadError",
    "ResourceRegistry",
    "ResourceRouter",
    "ResourceRoutesError",
    "RouteTable",
    "Segment",
    "TextResourceHandler",
    "compile_matcher",
    "derive_definition",
    "render_placeholders",
    "split_frontmatter",
    "split_resource_path",
    "split_resource_uri",
]
