"""Abstract interface for resource content handlers.

A :class:`ResourceHandler` is the capability attached to every
:class:`~resourceroutes_core.ResourceDefinition`: given the parameters
extracted from a request URI it produces the resource content, or raises
a typed error.  The router only *locates* handlers; invoking them is the
job of the request-dispatch layer (for example
:func:`resourceroutes_mcp.create_mcp_server`).

Concrete implementations include
:class:`~resourceroutes_fs.FileResourceHandler` for files on disk,
:class:`~resourceroutes_http.HTTPResourceHandler` for remote content, and
:class:`TextResourceHandler` for in-memory text.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

# ``{{ userId }}`` style placeholders, names restricted like parameter names.
_PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z0-9_-]+)\s*\}\}")


class ResourceHandler(ABC):
    """Abstract base class that every resource handler must implement.

    Both methods are ``async`` so that implementations backed by network
    I/O stay non-blocking.

    Example::

        class GreetingHandler(ResourceHandler):
            async def read(self, params):
                return f"hello {params['name']}"

            async def get_metadata(self):
                return {"description": "A greeting."}
    """

    @abstractmethod
    async def read(self, params: Mapping[str, str]) -> str:
        """Return the content of the resource.

        Args:
            params: Parameter values extracted from the request URI, in
                template declaration order.  Empty for templates without
                parameters.

        Returns:
            The resource content as text.

        Raises:
            ResourceNotFoundError: If the content no longer exists.
            ResourceReadError: If the content cannot be produced.
        """

    @abstractmethod
    async def get_metadata(self) -> dict[str, Any]:
        """Return descriptive metadata for the resource.

        Common keys are ``name``, ``description`` and ``mimeType``.  All
        keys are optional.
        """


class TextResourceHandler(ResourceHandler):
    """Handler serving a fixed text with ``{{name}}`` placeholders.

    Placeholders naming a parameter are replaced by its value; any other
    placeholder is left untouched.

    Args:
        text: The resource content.
        metadata: Optional metadata returned by :meth:`get_metadata`.
    """

    def __init__(self, text: str, *, metadata: Mapping[str, Any] | None = None) -> None:
        self._text = text
        self._metadata = dict(metadata or {})

    async def read(self, params: Mapping[str, str]) -> str:
        return render_placeholders(self._text, params)

    async def get_metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    def __repr__(self) -> str:
        return f"TextResourceHandler({len(self._text)} chars)"


def render_placeholders(text: str, params: Mapping[str, str]) -> str:
    """Substitute ``{{name}}`` placeholders in *text* with *params* values.

    Example::

        render_placeholders("Hi {{ userId }}", {"userId": "42"})  # "Hi 42"
    """

    def _replace(match: re.Match[str]) -> str:
        return params.get(match.group(1), match.group(0))

    return _PLACEHOLDER_RE.sub(_replace, text)
