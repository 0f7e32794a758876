"""Local filesystem resource discovery.

This package provides :class:`LocalFileSystemResourceSource`, which
turns a directory tree of resource files into entries for
:class:`~resourceroutes_core.ResourceRouter`, and
:class:`FileResourceHandler`, which serves a single file.

Install::

    pip install resourceroutes
"""

from resourceroutes_fs.local import FileResourceHandler, LocalFileSystemResourceSource

__all__ = ["FileResourceHandler", "LocalFileSystemResourceSource"]
