"""Protocol definitions for Tether.

Defines the pluggable interfaces that resource-module bootstrap code
implements (ResourceModule, ResourcePackage) and the plain constructor
signature the registry stores (ResourceConstructor).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tether.resources import ResourceHandle


@runtime_checkable
class ResourceConstructor(Protocol):
    """Callable producing a handle from the parts of a URN."""

    def __call__(self, name: str, type_: str, urn: str) -> ResourceHandle:
        ...


@runtime_checkable
class ResourceModule(Protocol):
    """Protocol for a module of resource types (``pkg:mod:*``)."""

    def construct(self, name: str, type_: str, urn: str) -> ResourceHandle:
        """Construct a handle for a resource of this module.

        Should raise for types the module does not know.
        """
        ...


@runtime_checkable
class ResourcePackage(Protocol):
    """Protocol for a package, used to construct its provider resources."""

    def construct_provider(self, name: str, type_: str, urn: str) -> ResourceHandle:
        """Construct a handle for a ``pulumi:providers:<pkg>`` resource."""
        ...
