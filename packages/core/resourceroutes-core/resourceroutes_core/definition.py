"""Resource definitions and match results.

A :class:`ResourceDefinition` is created once per resource file by
:func:`~resourceroutes_core.derive_definition` and never changes after
that.  A :class:`MatchResult` is created per request by
:meth:`RouteTable.match <resourceroutes_core.RouteTable.match>`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from resourceroutes_core.handler import ResourceHandler


@dataclass(frozen=True, slots=True)
class Segment:
    """One segment of a URI template after the scheme.

    Literal:  ``profile``   (is_param=False, value="profile")
    Param:    ``[userId]``  (is_param=True, value="userId")
    """

    value: str
    is_param: bool = False

    def render(self) -> str:
        """Return the segment as it appears in a URI template."""
        return f"[{self.value}]" if self.is_param else self.value


@dataclass(frozen=True, slots=True)
class ResourceDefinition:
    """An addressable resource derived from a file path.

    Two definitions are equal when they have the same scheme and
    segments; the raw path and the handler do not take part in the
    comparison.

    Attributes:
        file_path: Raw path segments as discovered (extension stripped).
        scheme: The URI scheme, e.g. ``users``.
        segments: Template segments after the scheme.
        handler: Capability producing the content.  Never invoked by
            the router.
    """

    file_path: tuple[str, ...] = field(compare=False)
    scheme: str
    segments: tuple[Segment, ...]
    handler: ResourceHandler = field(compare=False, repr=False)

    @property
    def uri_template(self) -> str:
        """The canonical template, e.g. ``users://[userId]/profile``."""
        return f"{self.scheme}://" + "/".join(s.render() for s in self.segments)

    @property
    def param_names(self) -> tuple[str, ...]:
        """Parameter names in declaration order."""
        return tuple(s.value for s in self.segments if s.is_param)

    @property
    def specificity(self) -> int:
        """Number of literal segments; higher wins when templates overlap."""
        return sum(1 for s in self.segments if not s.is_param)

    def expand(self, params: dict[str, str]) -> str:
        """Build a concrete URI by substituting *params* into the template.

        Raises:
            KeyError: If a parameter of the template is missing.
        """
        parts = [params[s.value] if s.is_param else s.value for s in self.segments]
        return f"{self.scheme}://" + "/".join(parts)


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Result of a successful match.

    Attributes:
        definition: The matched definition.
        params: Extracted values keyed by parameter name, in template
            declaration order.
    """

    definition: ResourceDefinition
    params: dict[str, str]

    @property
    def handler(self) -> ResourceHandler:
        """Shortcut for ``definition.handler``."""
        return self.definition.handler
