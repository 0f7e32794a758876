"""Immutable route table used to resolve request URIs.

A :class:`RouteTable` is a read-only snapshot of a set of definitions
with their compiled matchers indexed by scheme and segment count.  Any
number of requests may match against the same table concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from types import MappingProxyType
from typing import Literal
from xml.etree.ElementTree import Element, SubElement, indent, tostring

from resourceroutes_core.definition import MatchResult, ResourceDefinition
from resourceroutes_core.exceptions import AmbiguousRouteError, ResourceNotFoundError
from resourceroutes_core.matcher import Matcher, compile_matcher
from resourceroutes_core.parsing import split_resource_uri

_logger = logging.getLogger(__name__)


class RouteTable:
    """Compiled, immutable set of resource definitions.

    Candidates for a request are looked up by scheme first, then by
    segment count, so a match only ever compares against templates of
    the same addressing namespace and length.  Within a bucket the
    matchers are ordered most specific first (ties broken by template
    text), which makes the outcome independent of registration order.

    The constructor performs no collision checks.  Build tables through
    :meth:`ResourceRegistry.snapshot <resourceroutes_core.ResourceRegistry.snapshot>`
    to have ambiguous templates rejected up front.

    Usage::

        table = registry.snapshot()
        match = table.match("reports://2024/03/summary")
        match.params  # {"year": "2024", "month": "03"}
    """

    __slots__ = ("_definitions", "_index")

    def __init__(self, definitions: Iterable[ResourceDefinition] = ()) -> None:
        self._definitions: tuple[ResourceDefinition, ...] = tuple(
            sorted(definitions, key=lambda d: d.uri_template)
        )
        index: dict[str, dict[int, list[Matcher]]] = {}
        for definition in self._definitions:
            matcher = compile_matcher(definition)
            index.setdefault(definition.scheme, {}).setdefault(matcher.length, []).append(matcher)
        for buckets in index.values():
            for matchers in buckets.values():
                matchers.sort(
                    key=lambda m: (-m.definition.specificity, m.definition.uri_template)
                )
        self._index = MappingProxyType(
            {
                scheme: MappingProxyType({n: tuple(ms) for n, ms in buckets.items()})
                for scheme, buckets in index.items()
            }
        )

    def __repr__(self) -> str:
        n = len(self._definitions)
        label = "resource" if n == 1 else "resources"
        return f"RouteTable({n} {label})"

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, uri_template: object) -> bool:
        return any(d.uri_template == uri_template for d in self._definitions)

    @property
    def definitions(self) -> tuple[ResourceDefinition, ...]:
        """All definitions, sorted by URI template."""
        return self._definitions

    @property
    def schemes(self) -> frozenset[str]:
        """Schemes with at least one definition."""
        return frozenset(self._index)

    def match(self, uri: str) -> MatchResult:
        """Resolve a concrete URI to its definition and parameters.

        When several templates accept *uri* the one with the most literal
        segments wins.

        Args:
            uri: A URI of the form ``scheme://seg1/seg2/...``.

        Returns:
            A fresh :class:`~resourceroutes_core.MatchResult`.

        Raises:
            ResourceNotFoundError: If *uri* is malformed or no template
                matches it.
            AmbiguousRouteError: If the best matches tie on specificity.
        """
        segments = split_resource_uri(uri)
        candidates = self._index.get(segments[0], {}).get(len(segments), ())

        best: MatchResult | None = None
        tied: list[str] = []
        for matcher in candidates:
            if best is not None and matcher.definition.specificity < best.definition.specificity:
                break
            params = matcher.match(segments)
            if params is None:
                continue
            if best is None:
                best = MatchResult(definition=matcher.definition, params=params)
            else:
                tied.append(matcher.definition.uri_template)

        if best is None:
            raise ResourceNotFoundError(f"No resource matches {uri!r}", uri=uri)
        if tied:
            candidates_found = tuple(sorted([best.definition.uri_template, *tied]))
            _logger.error(
                "Ambiguous route for %s: %s match with equal specificity",
                uri,
                ", ".join(candidates_found),
            )
            raise AmbiguousRouteError(
                f"URI {uri!r} matches {len(candidates_found)} templates with equal "
                f"specificity: {', '.join(candidates_found)}",
                uri=uri,
                candidates=candidates_found,
            )
        return best

    async def get_catalog(
        self,
        *,
        format: Literal["xml", "markdown"] = "xml",
    ) -> str:
        """Build a resource catalog string for system-prompt injection.

        ``"xml"``
            An ``<available_resources>`` XML block.

        ``"markdown"``
            A human-readable Markdown listing.

        Each entry carries the URI template, its parameters and the
        ``name`` and ``description`` from the handler's metadata.

        Raises:
            ValueError: If *format* is not ``"xml"`` or ``"markdown"``.
        """
        if format == "xml":
            return await self._build_xml()
        if format == "markdown":
            return await self._build_markdown()
        msg = f"Unsupported format {format!r}; expected 'xml' or 'markdown'."
        raise ValueError(msg)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _build_xml(self) -> str:
        """Return an ``<available_resources>`` XML block."""
        if not self._definitions:
            return "<available_resources />"

        root = Element("available_resources")
        for definition in self._definitions:
            meta = await definition.handler.get_metadata()
            resource_el = SubElement(root, "resource")
            SubElement(resource_el, "uri").text = definition.uri_template
            SubElement(resource_el, "name").text = str(meta.get("name", definition.file_path[-1]))
            SubElement(resource_el, "description").text = str(meta.get("description", ""))
            if definition.param_names:
                params_el = SubElement(resource_el, "params")
                for name in definition.param_names:
                    SubElement(params_el, "param").text = name
        indent(root, space="  ")
        return tostring(root, encoding="unicode")

    async def _build_markdown(self) -> str:
        """Return a Markdown-formatted resource catalog."""
        if not self._definitions:
            return "No resources are currently available."

        lines: list[str] = [
            "# Available Resources",
            "",
        ]
        for definition in self._definitions:
            meta = await definition.handler.get_metadata()
            name = meta.get("name", definition.file_path[-1])
            description = meta.get("description", "No description available.")

            lines.append(f"## {name}")
            lines.append(f"- **URI**: `{definition.uri_template}`")
            if definition.param_names:
                lines.append(f"- **Parameters**: {', '.join(definition.param_names)}")
            lines.append(f"- **Description**: {description}")
            lines.append("")

        return "\n".join(lines)
