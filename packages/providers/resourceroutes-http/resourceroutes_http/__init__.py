"""HTTP resource handler.

This package provides :class:`HTTPResourceHandler`, a
:class:`~resourceroutes_core.ResourceHandler` that fetches resource
content from any HTTP host, with template parameters substituted into
the URL.

Install::

    pip install resourceroutes
"""

from resourceroutes_http.static import HTTPResourceHandler

__all__ = ["HTTPResourceHandler"]
