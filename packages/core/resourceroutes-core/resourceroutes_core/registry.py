"""Registration of resource definitions.

The :class:`ResourceRegistry` collects definitions during a scan phase
and rejects collisions as they are registered.  Once complete it is
frozen into an immutable :class:`~resourceroutes_core.RouteTable` with
:meth:`ResourceRegistry.snapshot`, which is what requests are matched
against.

Example::

    from resourceroutes_core import ResourceRegistry, TextResourceHandler

    registry = ResourceRegistry()
    registry.register("(users)/[userId]/profile", TextResourceHandler("user {{userId}}"))
    registry.register("(config)/app", TextResourceHandler("debug=false"))

    table = registry.snapshot()
    match = table.match("users://42/profile")
    print(match.params)  # {"userId": "42"}
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Union, overload

from resourceroutes_core.definition import ResourceDefinition
from resourceroutes_core.exceptions import DuplicateResourceError, ResourceNotFoundError
from resourceroutes_core.handler import ResourceHandler
from resourceroutes_core.table import RouteTable
from resourceroutes_core.template import derive_definition
from resourceroutes_core.validation import find_conflict

#: A resource path: ``"(users)/[userId]/profile.md"`` or its raw segments.
ResourcePath = Union[str, Sequence[str]]


def _is_path(value: object) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


class ResourceRegistry:
    """Collects resource definitions and rejects collisions.

    Each URI template may be registered once.  A definition is also
    rejected when it overlaps an existing one with the same specificity,
    because no concrete URI accepted by both could be routed
    unambiguously.  Both cases raise
    :class:`~resourceroutes_core.DuplicateResourceError`; the definition
    registered first stays active.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, ResourceDefinition] = {}

    def __repr__(self) -> str:
        n = len(self._definitions)
        label = "resource" if n == 1 else "resources"
        return f"ResourceRegistry({n} {label})"

    def __len__(self) -> int:
        return len(self._definitions)

    @overload
    def register(self, path: ResourcePath, handler: ResourceHandler) -> ResourceDefinition: ...

    @overload
    def register(
        self, entries: list[tuple[ResourcePath, ResourceHandler]]
    ) -> list[ResourceDefinition]: ...

    def register(
        self,
        path_or_entries: ResourcePath | list[tuple[ResourcePath, ResourceHandler]],
        handler: ResourceHandler | None = None,
    ) -> ResourceDefinition | list[ResourceDefinition]:
        """Register one or more resources with their handlers.

        **Single resource**::

            registry.register("(users)/[userId]/profile.md", handler)
            registry.register(["(users)", "[userId]", "profile"], handler)

        **Batch registration**::

            registry.register([
                ("(config)/app.md", config_handler),
                ("docs/readme.md", readme_handler),
            ])

        Batch registration is **atomic**: if any entry is rejected, none
        of the entries in the batch are registered.

        Args:
            path_or_entries: A resource path (string or raw segments), or
                a ``list`` of ``(path, handler)`` tuples.
            handler: The :class:`~resourceroutes_core.ResourceHandler` for
                a single resource.  Must be omitted for a batch.

        Returns:
            The registered definition, or the list of definitions for a
            batch.

        Raises:
            InvalidSegmentNameError: If a path has an invalid segment.
            EmptySchemeError: If a path has no usable scheme.
            DuplicateResourceError: If a definition collides with another.
            ValueError: If the arguments are invalid.
        """
        if handler is not None:
            if not _is_path(path_or_entries):
                raise ValueError(
                    "handler must not be passed when registering a batch -- "
                    "include handlers in the list of tuples instead"
                )
            return self._register_one(path_or_entries, handler)  # type: ignore[arg-type]
        if isinstance(path_or_entries, list) and all(
            isinstance(e, tuple) for e in path_or_entries
        ):
            return self._register_batch(path_or_entries)
        if _is_path(path_or_entries):
            raise ValueError("handler is required when registering a single resource")
        raise ValueError("Expected a resource path or a list of (path, handler) tuples")

    def _register_one(self, path: ResourcePath, handler: ResourceHandler) -> ResourceDefinition:
        """Derive, check and register a single definition."""
        definition = derive_definition(path, handler)
        self._check(definition, self._definitions.values())
        self._definitions[definition.uri_template] = definition
        return definition

    def _register_batch(
        self, entries: list[tuple[ResourcePath, ResourceHandler]]
    ) -> list[ResourceDefinition]:
        """Derive and check every entry, then register them all."""
        pending: list[ResourceDefinition] = []
        for path, handler in entries:
            definition = derive_definition(path, handler)
            self._check(definition, [*self._definitions.values(), *pending])
            pending.append(definition)

        # All passed -- commit.
        for definition in pending:
            self._definitions[definition.uri_template] = definition
        return pending

    @staticmethod
    def _check(definition: ResourceDefinition, existing: Collection[ResourceDefinition]) -> None:
        template = definition.uri_template
        for other in existing:
            if other.uri_template == template:
                raise DuplicateResourceError(
                    f"Duplicate resource {template!r} -- already registered "
                    f"from {'/'.join(other.file_path)!r}",
                    uri_template=template,
                    conflicting=template,
                    path=definition.file_path,
                )
        conflict = find_conflict(definition, existing)
        if conflict is not None:
            raise DuplicateResourceError(
                f"Resource {template!r} conflicts with {conflict.uri_template!r} -- "
                f"both match the same URIs with equal specificity",
                uri_template=template,
                conflicting=conflict.uri_template,
                path=definition.file_path,
            )

    def list_resources(self) -> list[ResourceDefinition]:
        """Return registered definitions sorted by URI template."""
        return sorted(self._definitions.values(), key=lambda d: d.uri_template)

    def get_resource(self, uri_template: str) -> ResourceDefinition:
        """Return the definition registered under *uri_template*.

        Raises:
            ResourceNotFoundError: If no definition has that template.
        """
        try:
            return self._definitions[uri_template]
        except KeyError:
            raise ResourceNotFoundError(
                f"Resource template {uri_template!r} not found in registry",
                uri=uri_template,
            ) from None

    def snapshot(self) -> RouteTable:
        """Freeze the current definitions into an immutable route table.

        Later registrations do not affect tables that were already
        taken.
        """
        return RouteTable(self._definitions.values())
