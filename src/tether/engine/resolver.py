"""Resource reference resolution.

Turns a resource reference (URN plus optional ID) into a ResourceHandle
using the registry. One resolver serves one decode pass and remembers every
handle it produced, so outputs from that pass can hand back fully typed
handles from ``dependent_resources()``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from tether.engine.urn import ParsedURN, parse_urn
from tether.exceptions import InvalidURNError, UnrecognizedResourceTypeError
from tether.models.config import DecoderConfig
from tether.registry import ResourceRegistry, default_registry
from tether.resources import CustomResourceHandle, DependencyResource, ResourceHandle

logger = logging.getLogger(__name__)


class ResourceReferenceResolver:
    """Resolves resource references against a ResourceRegistry."""

    def __init__(
        self,
        registry: ResourceRegistry | None = None,
        config: DecoderConfig | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._config = config or DecoderConfig()
        self._handles: dict[str, ResourceHandle] = {}

    @property
    def handles(self) -> Mapping[str, ResourceHandle]:
        """Handles resolved so far, keyed by URN."""
        return self._handles

    def resolve(self, urn: str, resource_id: str | None = None) -> ResourceHandle:
        """Resolve a reference to a handle.

        Args:
            urn: The referenced resource's URN.
            resource_id: The resource's ID, if it is a custom resource.

        Returns:
            A handle built by the registered constructor, or a
            DependencyResource when the type is not registered and the
            policy allows degrading.

        Raises:
            UnrecognizedResourceTypeError: Unregistered type, strict policy.
            InvalidURNError: Malformed URN, strict policy.
        """
        handle = self._handles.get(urn)
        if handle is None:
            handle = self._construct(urn)
            self._handles[urn] = handle
        if isinstance(handle, CustomResourceHandle):
            handle.bind_id(resource_id)
        return handle

    def _construct(self, urn: str) -> ResourceHandle:
        try:
            parsed = parse_urn(urn)
        except InvalidURNError:
            if self._config.strict:
                raise
            logger.debug("Unparseable URN %r; using a dependency-only handle", urn)
            return DependencyResource(urn)

        ctor = self._find_constructor(parsed)
        if ctor is None:
            if self._config.strict:
                raise UnrecognizedResourceTypeError(parsed.type, urn)
            logger.debug(
                "No constructor registered for type '%s'; using a dependency-only handle for %s",
                parsed.type, urn,
            )
            return DependencyResource(urn)
        return ctor(parsed.name, parsed.type, urn)

    def _find_constructor(self, parsed: ParsedURN):
        if parsed.is_provider:
            return self._registry.lookup_provider(parsed.package)
        return self._registry.lookup(parsed.package, parsed.module)
