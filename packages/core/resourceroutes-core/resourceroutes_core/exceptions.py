"""Exception hierarchy for resource routing.

Every exception raised by :mod:`resourceroutes_core` (and by the provider
and integration packages that follow its conventions) inherits from
:class:`ResourceRoutesError`, so callers can catch the whole family with a
single ``except`` clause.

Errors fall into two groups:

* **Registration errors** -- subclasses of :class:`RegistrationError`.
  They reject a single resource definition while a registry is being
  built and never affect definitions that were already accepted.
  They also inherit from :class:`ValueError`.
* **Request errors** -- :class:`ResourceNotFoundError`,
  :class:`AmbiguousRouteError` and :class:`ResourceReadError`.  They are
  raised while resolving or reading a concrete URI and are meant to be
  rendered as protocol-level error responses.
"""

from __future__ import annotations


class ResourceRoutesError(Exception):
    """Base exception for all resource routing errors."""


class RegistrationError(ResourceRoutesError, ValueError):
    """A resource definition could not be registered.

    Attributes:
        path: The raw path segments of the rejected definition, when known.
    """

    def __init__(self, message: str, *, path: tuple[str, ...] | None = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidSegmentNameError(RegistrationError):
    """A path segment cannot be turned into a template segment.

    Raised for bracketed segments with an empty or illegal name
    (``[]``, ``[user id]``), for schemes that are not valid URI schemes,
    and for empty literal segments.

    Attributes:
        segment: The offending raw segment.
    """

    def __init__(
        self,
        message: str,
        *,
        segment: str,
        path: tuple[str, ...] | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.segment = segment


class EmptySchemeError(RegistrationError):
    """A path has no segment that can name the scheme or the resource.

    Example::

        derive_definition(["(config)"], handler)  # only a route group
    """


class DuplicateResourceError(RegistrationError):
    """A definition collides with one that is already registered.

    Two definitions collide when they derive the same URI template, or
    when they can match the same concrete URI with the same specificity
    (for example ``notes://[id]`` and ``notes://[slug]``).

    Attributes:
        uri_template: Template of the rejected definition.
        conflicting: Template of the definition that stays registered.
    """

    def __init__(
        self,
        message: str,
        *,
        uri_template: str,
        conflicting: str,
        path: tuple[str, ...] | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.uri_template = uri_template
        self.conflicting = conflicting


class ResourceNotFoundError(ResourceRoutesError, LookupError):
    """No resource exists for the requested URI.

    Raised by :meth:`RouteTable.match <resourceroutes_core.RouteTable.match>`
    when no template matches (or the URI is malformed), and by handlers
    when the content behind a matched template is gone.

    Attributes:
        uri: The requested URI, when known.

    Example::

        try:
            match = router.match("users://42/settings")
        except ResourceNotFoundError as exc:
            print(f"nothing at {exc.uri}")
    """

    def __init__(self, message: str, *, uri: str | None = None) -> None:
        super().__init__(message)
        self.uri = uri


class AmbiguousRouteError(ResourceRoutesError, RuntimeError):
    """Two templates matched one URI with the same specificity.

    Registries reject such pairs eagerly, so this only happens when a
    :class:`~resourceroutes_core.RouteTable` was assembled without going
    through :class:`~resourceroutes_core.ResourceRegistry`.  It signals a
    broken route set, not a missing resource.

    Attributes:
        uri: The requested URI.
        candidates: Templates that matched, sorted.
    """

    def __init__(self, message: str, *, uri: str, candidates: tuple[str, ...]) -> None:
        super().__init__(message)
        self.uri = uri
        self.candidates = candidates


class ResourceReadError(ResourceRoutesError):
    """A handler failed to produce content for a matched resource."""
