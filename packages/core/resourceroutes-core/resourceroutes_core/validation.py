"""Naming rules and conflict detection for resource templates.

This module holds the rules shared by the template deriver and the
registry:

* segment classification (route groups, parameters, literals),
* parameter-name and scheme syntax,
* overlap detection between two definitions.

Example::

    from resourceroutes_core.validation import overlaps

    overlaps(notes_by_id, notes_by_slug)  # True: notes://[id] vs notes://[slug]
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from resourceroutes_core.definition import ResourceDefinition
from resourceroutes_core.exceptions import InvalidSegmentNameError

_logger = logging.getLogger(__name__)

# Parameter names: non-empty, ASCII letters, digits, underscores, hyphens.
_PARAM_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")

# RFC 3986 scheme: a letter followed by letters, digits, "+", "-" or ".".
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


def is_group(segment: str) -> bool:
    """Return ``True`` if *segment* is a route group such as ``(users)``."""
    return (
        len(segment) >= 2
        and segment[0] == "("
        and segment[-1] == ")"
        and "(" not in segment[1:-1]
        and ")" not in segment[1:-1]
    )


def is_param(segment: str) -> bool:
    """Return ``True`` if *segment* is bracketed, such as ``[userId]``."""
    return len(segment) >= 2 and segment[0] == "[" and segment[-1] == "]"


def validate_param_name(segment: str, path: tuple[str, ...]) -> str:
    """Return the parameter name of a bracketed *segment*.

    Raises:
        InvalidSegmentNameError: If the name is empty or contains
            characters outside ``[A-Za-z0-9_-]``.
    """
    name = segment[1:-1]
    if not name:
        raise InvalidSegmentNameError(
            f"Empty parameter name in {'/'.join(path)!r}",
            segment=segment,
            path=path,
        )
    if not _PARAM_NAME_RE.match(name):
        raise InvalidSegmentNameError(
            f"Invalid parameter name {name!r} in {'/'.join(path)!r} -- "
            f"only letters, digits, underscores and hyphens are allowed",
            segment=segment,
            path=path,
        )
    return name


def validate_scheme(scheme: str, segment: str, path: tuple[str, ...]) -> str:
    """Return *scheme* if it is a valid URI scheme.

    Raises:
        InvalidSegmentNameError: If *scheme* does not start with a letter
            or contains characters other than letters, digits, ``+``,
            ``-`` and ``.``.
    """
    if not _SCHEME_RE.match(scheme):
        raise InvalidSegmentNameError(
            f"Invalid scheme {scheme!r} in {'/'.join(path)!r}",
            segment=segment,
            path=path,
        )
    return scheme


def overlaps(a: ResourceDefinition, b: ResourceDefinition) -> bool:
    """Return ``True`` if some concrete URI can match both definitions.

    Two templates overlap when they share the scheme and the segment
    count, and no position holds two different literals.
    """
    if a.scheme != b.scheme or len(a.segments) != len(b.segments):
        return False
    for left, right in zip(a.segments, b.segments):
        if not left.is_param and not right.is_param and left.value != right.value:
            return False
    return True


def find_conflict(
    definition: ResourceDefinition,
    existing: Iterable[ResourceDefinition],
) -> ResourceDefinition | None:
    """Return the first definition in *existing* that *definition* conflicts with.

    A conflict is an overlap with equal specificity: for the URIs both
    templates accept, neither one would be preferred.  Overlaps with
    different specificity are resolved at match time (most literal
    segments wins) and are not conflicts.
    """
    for other in existing:
        if other.specificity == definition.specificity and overlaps(definition, other):
            _logger.debug(
                "Template %s conflicts with %s",
                definition.uri_template,
                other.uri_template,
            )
            return other
    return None
