"""Compile resource definitions into segment matchers.

A :class:`Matcher` is built once per definition when a
:class:`~resourceroutes_core.RouteTable` is created and is then used
read-only by every request.
"""

from __future__ import annotations

from collections.abc import Sequence

from resourceroutes_core.definition import ResourceDefinition


class Matcher:
    """Matches split request URIs against one definition.

    Literal positions are checked before any parameter is captured, so a
    miss costs no allocations.

    Usage::

        matcher = compile_matcher(definition)   # users://[userId]/profile
        matcher.match(("users", "42", "profile"))  # {"userId": "42"}
        matcher.match(("users", "42"))             # None
    """

    __slots__ = ("_captures", "_length", "_literals", "definition")

    def __init__(self, definition: ResourceDefinition) -> None:
        self.definition = definition
        # Index 0 of a request is the scheme.
        self._length = len(definition.segments) + 1
        self._literals: tuple[tuple[int, str], ...] = ((0, definition.scheme),) + tuple(
            (i, seg.value) for i, seg in enumerate(definition.segments, 1) if not seg.is_param
        )
        self._captures: tuple[tuple[int, str], ...] = tuple(
            (i, seg.value) for i, seg in enumerate(definition.segments, 1) if seg.is_param
        )

    @property
    def length(self) -> int:
        """Number of request segments accepted, scheme included."""
        return self._length

    def match(self, segments: Sequence[str]) -> dict[str, str] | None:
        """Return extracted parameters, or ``None`` if *segments* do not match.

        Args:
            segments: The request scheme followed by its path segments.
        """
        if len(segments) != self._length:
            return None
        for index, literal in self._literals:
            if segments[index] != literal:
                return None
        params: dict[str, str] = {}
        for index, name in self._captures:
            value = segments[index]
            if not value:
                return None
            params[name] = value
        return params

    def __repr__(self) -> str:
        return f"Matcher({self.definition.uri_template!r})"


def compile_matcher(definition: ResourceDefinition) -> Matcher:
    """Return a :class:`Matcher` for *definition*."""
    return Matcher(definition)
