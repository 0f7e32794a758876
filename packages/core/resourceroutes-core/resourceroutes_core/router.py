"""Process-wide holder of the current route table.

The :class:`ResourceRouter` is the object request dispatchers keep a
reference to.  It always points at one complete
:class:`~resourceroutes_core.RouteTable`; :meth:`ResourceRouter.rebuild`
builds a replacement from scratch and publishes it with a single
reference assignment, so a request in flight sees either the old table
or the new one, never a partially built one.

Example::

    from resourceroutes_core import ResourceRouter
    from resourceroutes_fs import LocalFileSystemResourceSource

    source = LocalFileSystemResourceSource(Path("./resources"))
    router = ResourceRouter()
    errors = router.rebuild(source.discover())

    match = router.match("users://42/profile")
    content = await match.handler.read(match.params)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from resourceroutes_core.definition import MatchResult
from resourceroutes_core.exceptions import RegistrationError
from resourceroutes_core.handler import ResourceHandler
from resourceroutes_core.registry import ResourcePath, ResourceRegistry
from resourceroutes_core.table import RouteTable

_logger = logging.getLogger(__name__)


class ResourceRouter:
    """Routes request URIs through the currently published table.

    Args:
        table: Initial table.  Defaults to an empty one.
    """

    def __init__(self, table: RouteTable | None = None) -> None:
        self._table = table if table is not None else RouteTable()

    def __repr__(self) -> str:
        return f"ResourceRouter({self._table!r})"

    @property
    def table(self) -> RouteTable:
        """The currently published table."""
        return self._table

    def match(self, uri: str) -> MatchResult:
        """Resolve *uri* against the current table.

        See :meth:`RouteTable.match <resourceroutes_core.RouteTable.match>`.
        """
        return self._table.match(uri)

    def publish(self, table: RouteTable) -> None:
        """Replace the current table with *table*."""
        self._table = table
        _logger.info("Published route table with %d resources", len(table))

    def rebuild(
        self,
        entries: Iterable[tuple[ResourcePath, ResourceHandler]],
    ) -> list[RegistrationError]:
        """Register *entries* into a fresh registry and publish it.

        Entries are registered one at a time in the given order.  A
        rejected entry is logged and skipped; it does not stop the rest
        of the scan.  The new table is published even if some entries
        were rejected.

        Args:
            entries: ``(path, handler)`` pairs, typically from
                :meth:`LocalFileSystemResourceSource.discover
                <resourceroutes_fs.LocalFileSystemResourceSource.discover>`.

        Returns:
            The registration errors of the rejected entries, in order.
        """
        registry = ResourceRegistry()
        errors: list[RegistrationError] = []
        for path, handler in entries:
            try:
                registry.register(path, handler)
            except RegistrationError as exc:
                _logger.warning("Skipping resource %r: %s", path, exc)
                errors.append(exc)
        self.publish(registry.snapshot())
        return errors
