"""HTTP-backed resource handler.

This module implements :class:`HTTPResourceHandler`, which serves a
resource by fetching a URL from any HTTP host.  The URL may contain
``{name}`` placeholders that are filled from the parameters of the
matched template::

    registry.register(
        "(docs)/[page]",
        HTTPResourceHandler("https://cdn.example.com/docs/{page}.md"),
    )
    # docs://install -> GET https://cdn.example.com/docs/install.md

Parameter values are percent-encoded before substitution so that a
value can never change the structure of the URL.

Requests go through a shared `httpx <https://www.python-httpx.org/>`_
async client.
"""

from __future__ import annotations

import logging
import re
import warnings
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlparse

import httpx

from resourceroutes_core import ResourceHandler, ResourceNotFoundError, ResourceReadError

_logger = logging.getLogger(__name__)

# ``{page}`` style placeholders, names restricted like parameter names.
_URL_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z0-9_-]+)\}")

#: Responses larger than this many bytes are rejected (10 MB).
DEFAULT_MAX_RESPONSE_BYTES: int = 10 * 1024 * 1024

#: Connect, read, write and pool timeout for owned clients, in seconds.
DEFAULT_TIMEOUT_SECONDS: float = 30.0


class HTTPResourceHandler(ResourceHandler):
    """Handler fetching resource content over HTTP.

    Unless a client is passed in, the handler creates one
    :class:`httpx.AsyncClient` and closes it in :meth:`aclose` (or on
    leaving an ``async with`` block).  A client passed in is never closed
    here.

    Args:
        url: URL template.  ``{name}`` placeholders are replaced by the
            URL-quoted value of the parameter *name*.
        client: A client to share with other handlers.  Its owner
            closes it.
        headers: Headers for every request, such as ``Authorization``.
            Not allowed together with *client*.
        params: Query parameters for every request, such as a signed
            URL token.  Not allowed together with *client*.
        require_tls: If ``True``, reject ``http://`` URLs with a
            :class:`ValueError`.  Defaults to ``False``, which allows
            HTTP but emits a :class:`UserWarning`.
        max_response_bytes: Largest response body accepted.
        metadata: Optional metadata returned by :meth:`get_metadata`.

    Example::

        async with HTTPResourceHandler("https://cdn.example.com/docs/{page}.md") as handler:
            text = await handler.read({"page": "install"})
    """

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        require_tls: bool = False,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        if client is not None and (headers is not None or params is not None):
            raise ValueError(
                "Cannot specify both 'client' and 'headers'/'params'; "
                "set them on the shared client instead."
            )

        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"Unsupported URL scheme in {url!r}; expected http or https")
        if parsed.scheme == "http":
            if require_tls:
                raise ValueError(f"require_tls forbids the plain HTTP URL {url!r}")
            warnings.warn(
                f"Resource URL {url!r} uses unencrypted HTTP; content can be "
                "read or altered in transit.",
                UserWarning,
                stacklevel=2,
            )

        self._url = url
        self._max_response_bytes = max_response_bytes
        self._metadata = dict(metadata or {})
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers=headers,
            params=params,
            timeout=httpx.Timeout(DEFAULT_TIMEOUT_SECONDS),
            follow_redirects=False,
        )

    @property
    def url(self) -> str:
        """The URL template."""
        return self._url

    @property
    def placeholders(self) -> tuple[str, ...]:
        """Placeholder names in the URL template, in order of appearance."""
        return tuple(_URL_PLACEHOLDER_RE.findall(self._url))

    def __repr__(self) -> str:
        return f"HTTPResourceHandler({self._url!r})"

    async def aclose(self) -> None:
        """Close the underlying HTTP client if it is owned by this handler."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HTTPResourceHandler:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # ResourceHandler
    # ------------------------------------------------------------------

    async def read(self, params: Mapping[str, str]) -> str:
        """Fetch the resource with *params* substituted into the URL.

        Raises:
            ResourceNotFoundError: On a 404 response.
            ResourceReadError: If a placeholder has no parameter, on other
                HTTP or connection errors, or if the response exceeds
                *max_response_bytes*.
        """
        url = self.expand_url(params)
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise ResourceReadError("HTTP request failed") from exc
        if resp.status_code == 404:
            raise ResourceNotFoundError("Resource content not found upstream")
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ResourceReadError(f"HTTP {resp.status_code} error") from exc
        size = len(resp.content)
        if size > self._max_response_bytes:
            raise ResourceReadError(
                f"Response from {url} exceeds maximum size "
                f"({size} > {self._max_response_bytes} bytes)"
            )
        _logger.debug("Fetched %d bytes from %s", size, url)
        return resp.text

    async def get_metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    # ------------------------------------------------------------------
    # URL expansion
    # ------------------------------------------------------------------

    def expand_url(self, params: Mapping[str, str]) -> str:
        """Return the URL with ``{name}`` placeholders filled from *params*.

        Raises:
            ResourceReadError: If a placeholder has no matching parameter.
        """

        def _replace(match: re.Match[str]) -> str:
            name = match.group(1)
            try:
                return quote(params[name], safe="")
            except KeyError:
                raise ResourceReadError(
                    f"URL placeholder {{{name}}} has no matching parameter"
                ) from None

        return _URL_PLACEHOLDER_RE.sub(_replace, self._url)
