"""Resource handles.

A ResourceHandle is the minimal identity of an engine resource, keyed by
URN. Its state fields (``urn``, ``id``) are themselves outputs so that
callers can depend on them like on any other value.

Registered constructors return subclasses of CustomResourceHandle,
ComponentResourceHandle or ProviderResourceHandle. DependencyResource is the
stateless fallback used when nothing richer is known about a URN.
"""

from __future__ import annotations

from typing import Any

from tether.output import DeferredOutputValue


class ResourceHandle:
    """Base class for all resource handles.

    Two handles are equal when they are of the same class and share a URN.
    """

    def __init__(self, type_: str | None, name: str | None, *, urn: str) -> None:
        self._type = type_
        self._name = name
        self._urn = urn
        self.urn = DeferredOutputValue.known(urn)

    @property
    def resource_type(self) -> str | None:
        return self._type

    @property
    def resource_name(self) -> str | None:
        return self._name

    @property
    def urn_value(self) -> str:
        """The URN as a plain string (known at construction)."""
        return self._urn

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceHandle):
            return NotImplemented
        return type(self) is type(other) and self._urn == other._urn

    def __hash__(self) -> int:
        return hash((type(self), self._urn))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._urn!r})"


class CustomResourceHandle(ResourceHandle):
    """A provider-managed resource. Has an ``id`` output.

    The ``id`` starts pending and is bound by the resolver from the
    reference it was created for.
    """

    def __init__(self, type_: str, name: str, *, urn: str) -> None:
        super().__init__(type_, name, urn=urn)
        self.id = DeferredOutputValue.pending()

    def bind_id(self, resource_id: str | None) -> None:
        """Settle the ``id`` output. A missing ID leaves it unknown.

        No-op when the ID was already bound (the same handle may be
        referenced more than once).
        """
        if self.id.is_settled:
            return
        if resource_id:
            self.id.set_result(resource_id)
        else:
            self.id._settle_unknown()


class ComponentResourceHandle(ResourceHandle):
    """A component resource: an aggregation of child resources, no ID."""

    def __init__(self, type_: str, name: str, *, urn: str) -> None:
        super().__init__(type_, name, urn=urn)


class ProviderResourceHandle(CustomResourceHandle):
    """A provider instance for a package."""

    def __init__(self, type_: str, name: str, *, urn: str) -> None:
        super().__init__(type_, name, urn=urn)
        self.package = type_.rsplit(":", 1)[-1]

    @property
    def reference(self) -> str:
        """Provider reference string ``<urn>::<id>``, once the ID is known."""
        if not self.id.is_settled or not self.id.is_known:
            raise RuntimeError(f"Provider {self._urn} has no known ID yet")
        return f"{self._urn}::{self.id._cell.result()}"


class DependencyResource(ResourceHandle):
    """A stateless handle carrying only a URN.

    Used to represent a dependency when no constructor for the URN's type is
    available or when only the URN was recorded.
    """

    def __init__(self, urn: str) -> None:
        super().__init__(None, None, urn=urn)


def is_resource(obj: Any) -> bool:
    """Return True if ``obj`` is a ResourceHandle."""
    return isinstance(obj, ResourceHandle)
