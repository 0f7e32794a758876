"""Derive URI templates from resource file paths.

Resource files are addressed by where they live::

    resources/
    ├── (config)/
    │   └── app.md                  -> config://app
    ├── (users)/
    │   └── [userId]/
    │       └── profile.md          -> users://[userId]/profile
    └── docs/
        └── (guides)/
            └── readme.md           -> docs://readme

The first segment names the scheme; route-group parentheses around it
are removed.  After the scheme, route groups are dropped, bracketed
segments become parameters, and everything else is literal text.
"""

from __future__ import annotations

from collections.abc import Sequence

from resourceroutes_core.definition import ResourceDefinition, Segment
from resourceroutes_core.exceptions import EmptySchemeError, InvalidSegmentNameError
from resourceroutes_core.handler import ResourceHandler
from resourceroutes_core.parsing import split_resource_path
from resourceroutes_core.validation import (
    is_group,
    is_param,
    validate_param_name,
    validate_scheme,
)


def derive_definition(
    path: str | Sequence[str],
    handler: ResourceHandler,
) -> ResourceDefinition:
    """Build a :class:`~resourceroutes_core.ResourceDefinition` from a file path.

    This is a pure function: the result is not registered anywhere.

    Args:
        path: Either raw path segments with the extension already
            stripped (``["(users)", "[userId]", "profile"]``) or a
            ``/``-separated relative path (``"(users)/[userId]/profile.md"``).
        handler: The :class:`~resourceroutes_core.ResourceHandler`
            serving the resource.

    Returns:
        The derived definition.

    Raises:
        EmptySchemeError: If the path has no segment outside route groups
            or if the scheme group is empty.
        InvalidSegmentNameError: If a parameter name is empty, illegal or
            repeated, if the scheme is invalid, or if a literal segment
            is empty.
        TypeError: If *handler* is not a ResourceHandler.
    """
    raw = split_resource_path(path) if isinstance(path, str) else tuple(path)
    if not isinstance(handler, ResourceHandler):
        raise TypeError(f"handler must be a ResourceHandler, got {type(handler).__name__}")
    if all(is_group(s) for s in raw):
        raise EmptySchemeError(
            f"Resource path {'/'.join(raw)!r} has no segment outside route groups",
            path=raw,
        )

    first = raw[0]
    if is_param(first):
        raise InvalidSegmentNameError(
            f"Scheme segment {first!r} cannot be a parameter",
            segment=first,
            path=raw,
        )
    scheme = first[1:-1] if is_group(first) else first
    if not scheme:
        raise EmptySchemeError(f"Empty route group names no scheme in {'/'.join(raw)!r}", path=raw)
    validate_scheme(scheme, first, raw)

    segments: list[Segment] = []
    seen: set[str] = set()
    for seg in raw[1:]:
        if is_group(seg):
            continue
        if is_param(seg):
            name = validate_param_name(seg, raw)
            if name in seen:
                raise InvalidSegmentNameError(
                    f"Parameter {name!r} appears twice in {'/'.join(raw)!r}",
                    segment=seg,
                    path=raw,
                )
            seen.add(name)
            segments.append(Segment(name, is_param=True))
        elif not seg or "/" in seg:
            raise InvalidSegmentNameError(
                f"Invalid literal segment {seg!r} in {'/'.join(raw)!r}",
                segment=seg,
                path=raw,
            )
        else:
            segments.append(Segment(seg))

    return ResourceDefinition(
        file_path=raw,
        scheme=scheme,
        segments=tuple(segments),
        handler=handler,
    )
