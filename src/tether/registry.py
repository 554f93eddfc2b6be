"""Resource constructor registry.

Maps a scope (``"pkg:mod"`` for a module, ``"pkg"`` for a whole package)
to a constructor ``(name, type, urn) -> ResourceHandle``. Provider
constructors are kept separately, keyed by the package they serve.

A process-wide default registry is available through ``default_registry()``
for resource-module bootstrap code; decoders accept an explicit registry so
tests and embedders can isolate themselves.
"""

from __future__ import annotations

import logging
import threading

from tether.exceptions import RegistrationError
from tether.protocols import ResourceConstructor, ResourceModule, ResourcePackage

logger = logging.getLogger(__name__)


class ResourceRegistry:
    """Registry of resource constructors.

    Mutation (register/reset) is serialized with a lock. Lookups are plain
    dict reads and are safe alongside concurrent lookups; they are not
    expected to race with registration.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._constructors: dict[str, ResourceConstructor] = {}
        self._providers: dict[str, ResourceConstructor] = {}

    # -- Registration ---------------------------------------------------

    def register(self, scope: str, constructor: ResourceConstructor) -> None:
        """Register a constructor for a module (``pkg:mod``) or package (``pkg``).

        Re-registering the same constructor is a no-op.

        Raises:
            ValueError: If the scope is empty or has more than two parts.
            RegistrationError: If a different constructor owns the scope.
        """
        if not scope or scope.count(":") > 1:
            raise ValueError(f"Invalid registry scope: {scope!r}")
        self._add(self._constructors, scope, constructor)

    def register_module(self, package: str, module: str, resource_module: ResourceModule) -> None:
        """Register a ResourceModule for all types under ``package:module``."""
        self.register(f"{package}:{module}", resource_module.construct)

    def register_package(self, package: str, resource_package: ResourcePackage) -> None:
        """Register a ResourcePackage for ``pulumi:providers:<package>`` types."""
        self._add(self._providers, package, resource_package.construct_provider)

    def _add(self, table: dict[str, ResourceConstructor], key: str, constructor: ResourceConstructor) -> None:
        with self._lock:
            existing = table.get(key)
            if existing is not None:
                if existing == constructor:
                    return
                raise RegistrationError(key)
            table[key] = constructor
        logger.debug("Registered resource constructor for '%s'", key)

    def reset(self) -> None:
        """Forget every registered constructor."""
        with self._lock:
            self._constructors.clear()
            self._providers.clear()
        logger.info("Resource registry reset")

    # -- Lookup ---------------------------------------------------------

    def lookup(self, package: str, module: str | None = None) -> ResourceConstructor | None:
        """Find the most specific constructor: ``pkg:mod`` first, then ``pkg``."""
        if module is not None:
            ctor = self._constructors.get(f"{package}:{module}")
            if ctor is not None:
                return ctor
        return self._constructors.get(package)

    def lookup_provider(self, package: str) -> ResourceConstructor | None:
        return self._providers.get(package)

    @property
    def scopes(self) -> set[str]:
        """All registered module and package scopes."""
        return set(self._constructors)

    @property
    def provider_packages(self) -> set[str]:
        return set(self._providers)

    def __len__(self) -> int:
        return len(self._constructors) + len(self._providers)


_default = ResourceRegistry()


def default_registry() -> ResourceRegistry:
    """The process-wide registry used when no explicit one is given."""
    return _default


def register_resource_module(package: str, module: str, resource_module: ResourceModule) -> None:
    _default.register_module(package, module, resource_module)


def register_resource_package(package: str, resource_package: ResourcePackage) -> None:
    _default.register_package(package, resource_package)


def reset_resource_registry() -> None:
    """Clear the process-wide registry (between independent test runs)."""
    _default.reset()
