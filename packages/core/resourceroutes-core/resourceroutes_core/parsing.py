"""Shared parsing utilities for resource paths, URIs and file content.

These helpers are used by the core router and by the provider packages,
which keeps path and URI splitting consistent across them.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any

import yaml

from resourceroutes_core.exceptions import ResourceNotFoundError


def split_resource_path(path: str) -> tuple[str, ...]:
    """Split a ``/``-separated resource file path into raw segments.

    Leading and trailing slashes are ignored and the extension of the
    final segment is stripped.  Directories keep their full names.

    Example::

        split_resource_path("(users)/[userId]/profile.md")
        # ("(users)", "[userId]", "profile")
    """
    parts = path.replace("\\", "/").strip("/").split("/")
    if parts == [""]:
        return ()
    parts[-1] = PurePosixPath(parts[-1]).stem or parts[-1]
    return tuple(parts)


def split_resource_uri(uri: str) -> tuple[str, ...]:
    """Split a concrete resource URI into its scheme and path segments.

    The scheme is returned as the first element.  No percent-decoding
    is performed; segments are returned verbatim.

    Example::

        split_resource_uri("users://42/profile")  # ("users", "42", "profile")

    Raises:
        ResourceNotFoundError: If *uri* has no ``scheme://`` prefix.
    """
    scheme, sep, rest = uri.partition("://")
    if not sep or not scheme:
        raise ResourceNotFoundError(f"Malformed resource URI {uri!r}", uri=uri)
    if not rest:
        return (scheme,)
    return (scheme, *rest.split("/"))


def split_frontmatter(raw: str) -> tuple[dict[str, Any], str]:
    """Split markdown content into YAML frontmatter and body.

    Frontmatter is the YAML block delimited by ``---`` at the very start
    of the text.  When it is missing or is not a valid YAML mapping the
    whole text is returned as the body with an empty dict.

    Example::

        meta, body = split_frontmatter(Path("profile.md").read_text())
        print(meta.get("description"))
    """
    if not raw.startswith("---"):
        return {}, raw

    end = raw.find("---", 3)
    if end == -1:
        return {}, raw

    try:
        metadata = yaml.safe_load(raw[3:end].strip()) or {}
    except yaml.YAMLError:
        return {}, raw
    if not isinstance(metadata, dict):
        return {}, raw
    return metadata, raw[end + 3 :].strip()
