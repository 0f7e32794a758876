"""Local filesystem discovery of resource files.

This module implements the file-discovery side of resource routing:

* :class:`LocalFileSystemResourceSource` walks a resources directory and
  yields one ``(segments, handler)`` pair per resource file, ready for
  :meth:`ResourceRouter.rebuild <resourceroutes_core.ResourceRouter.rebuild>`.
* :class:`FileResourceHandler` serves a single file, parsing YAML
  frontmatter from markdown files for its metadata.

Handlers read files on demand, so edits to an existing file show up on
the next read without a rebuild.  Adding, moving or removing files
changes the route set and needs a rebuild.

File I/O is synchronous inside ``async`` methods because resource files
are small and local disk reads do not meaningfully block the event loop.
"""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from resourceroutes_core import (
    ResourceHandler,
    ResourceNotFoundError,
    ResourceReadError,
    render_placeholders,
    split_frontmatter,
)

_logger = logging.getLogger(__name__)

#: Default maximum file size in bytes (10 MB).
DEFAULT_MAX_FILE_BYTES: int = 10 * 1024 * 1024

#: File extensions treated as resources by default.
DEFAULT_EXTENSIONS: tuple[str, ...] = (".md", ".txt", ".json")

_MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})


class FileResourceHandler(ResourceHandler):
    """Handler serving the content of one file.

    Markdown files may start with a YAML frontmatter block; its keys
    become the handler metadata and the block is stripped from the
    content.  ``{{name}}`` placeholders in the content are replaced with
    the request parameters.

    Args:
        path: The file to serve.
        max_file_bytes: Maximum allowed file size in bytes.  Larger
            files raise :class:`~resourceroutes_core.ResourceReadError`.

    Example::

        handler = FileResourceHandler(Path("resources/(users)/[userId]/profile.md"))
        text = await handler.read({"userId": "42"})
    """

    def __init__(self, path: Path, *, max_file_bytes: int = DEFAULT_MAX_FILE_BYTES) -> None:
        self._path = Path(path)
        self._max_file_bytes = max_file_bytes

    @property
    def path(self) -> Path:
        """The served file."""
        return self._path

    def __repr__(self) -> str:
        return f"FileResourceHandler({str(self._path)!r})"

    async def read(self, params: Mapping[str, str]) -> str:
        """Return the file content with placeholders substituted.

        Raises:
            ResourceNotFoundError: If the file no longer exists.
            ResourceReadError: If the file is too large or not UTF-8.
        """
        _, body = self._load()
        return render_placeholders(body, params)

    async def get_metadata(self) -> dict[str, Any]:
        """Return frontmatter keys plus a guessed ``mimeType``.

        A ``mimeType`` given in the frontmatter takes precedence.
        """
        metadata, _ = self._load()
        mime_type, _ = mimetypes.guess_type(self._path.name)
        if self._path.suffix in _MARKDOWN_SUFFIXES:
            mime_type = "text/markdown"
        result: dict[str, Any] = {"mimeType": mime_type or "text/plain"}
        result.update(metadata)
        return result

    def _load(self) -> tuple[dict[str, Any], str]:
        """Read the file and split off frontmatter for markdown files."""
        if not self._path.is_file():
            raise ResourceNotFoundError(f"Resource file not found: {str(self._path)!r}")
        size = self._path.stat().st_size
        if size > self._max_file_bytes:
            raise ResourceReadError(
                f"Resource file {str(self._path)!r} exceeds maximum size "
                f"({self._max_file_bytes} bytes)"
            )
        try:
            raw = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ResourceReadError(f"Resource file {str(self._path)!r} is not UTF-8") from exc
        if self._path.suffix in _MARKDOWN_SUFFIXES:
            return split_frontmatter(raw)
        return {}, raw


class LocalFileSystemResourceSource:
    """Discovers resource files below a root directory.

    Every file whose extension is in *extensions* becomes one entry.  Its
    path relative to *root*, with the extension stripped, gives the raw
    segments the URI template is derived from.  Hidden files and
    directories (names starting with ``.``) are skipped.

    Expected layout::

        root/
        ├── (config)/
        │   └── app.json                -> config://app
        ├── (users)/
        │   └── [userId]/
        │       └── profile.md          -> users://[userId]/profile
        └── docs/
            └── readme.md               -> docs://readme

    The source only discovers; it does not validate segment names or
    detect collisions.  Those checks happen when the entries are
    registered.

    Args:
        root: The resources directory.
        extensions: File extensions (with leading dot) to include.
        max_file_bytes: Passed to every :class:`FileResourceHandler`.

    Raises:
        NotADirectoryError: If *root* does not exist or is not a
            directory.

    Example::

        source = LocalFileSystemResourceSource(Path("./resources"))
        router = ResourceRouter()
        router.rebuild(source.discover())
    """

    def __init__(
        self,
        root: Path,
        *,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    ) -> None:
        self._root = Path(root)
        if not self._root.is_dir():
            raise NotADirectoryError(f"Resource root does not exist: {self._root}")
        self._extensions = frozenset(e if e.startswith(".") else f".{e}" for e in extensions)
        self._max_file_bytes = max_file_bytes

    @property
    def root(self) -> Path:
        """The resources directory."""
        return self._root

    def __repr__(self) -> str:
        return f"LocalFileSystemResourceSource({str(self._root)!r})"

    def discover(self) -> list[tuple[tuple[str, ...], FileResourceHandler]]:
        """Walk the root and return ``(segments, handler)`` pairs.

        Entries are sorted by relative path so rebuilds are
        reproducible.
        """
        entries: list[tuple[tuple[str, ...], FileResourceHandler]] = []
        for path in sorted(self._root.rglob("*")):
            relative = path.relative_to(self._root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if not path.is_file() or path.suffix not in self._extensions:
                continue
            segments = (*relative.parts[:-1], relative.stem)
            entries.append(
                (segments, FileResourceHandler(path, max_file_bytes=self._max_file_bytes))
            )
        _logger.debug("Discovered %d resource files under %s", len(entries), self._root)
        return entries
