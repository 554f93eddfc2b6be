"""Property bag decoding.

Walks a property bag received from the engine and rebuilds the values it
describes: plain data stays plain, while unknowns, secrets and declared
dependencies are lifted into DeferredOutputValues.

Collapse rules, per composite (list or map):

- A bare unknown anywhere below (not behind an output-value wrapper)
  collapses the whole composite into a single unknown.
- Otherwise a bare secret anywhere below collapses it into one secret
  value holding the structure with the secret wrappers stripped.
- Otherwise the structure is preserved as-is. Resource URNs found inside
  it are kept as latent dependencies: they do not force a wrapper, but when
  an enclosing property is wrapped anyway (declared dependencies, say) they
  join its dependency set, so a wrapped output always depends on every
  resource its payload references.

Output-value wrappers seal their subtree: they become outputs in place and
look like ordinary known, non-secret leaves to everything above them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from tether.engine.classifier import classify
from tether.engine.resolver import ResourceReferenceResolver
from tether.engine.scan import contains_outputs
from tether.exceptions import InvalidDependenciesError
from tether.models.config import DecoderConfig
from tether.models.nodes import (
    MapNode,
    OutputValueNode,
    ResourceRefNode,
    ScalarNode,
    SecretNode,
    SequenceNode,
    UnknownNode,
)
from tether.output import ABSENT, DeferredOutputValue
from tether.registry import ResourceRegistry
from tether.resources import ResourceHandle

logger = logging.getLogger(__name__)

_EMPTY: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Decoded:
    """Result of decoding one node.

    Fields:
        value: The decoded value (None when not known).
        secret: A secret was found in this node's unsealed scope.
        known: No unknown was found in this node's unsealed scope.
        deps: Dependencies that force this node to be wrapped.
        sealed: The node was an output-value wrapper.
        latent_deps: Resource URNs from a preserved structure. They only
            count when an enclosing node ends up wrapped.
    """

    value: Any
    secret: bool = False
    known: bool = True
    deps: frozenset[str] = _EMPTY
    sealed: bool = False
    latent_deps: frozenset[str] = field(default=_EMPTY)

    @property
    def all_deps(self) -> frozenset[str]:
        return self.deps | self.latent_deps


def decode_node(node: Any, resolver: ResourceReferenceResolver) -> Decoded:
    """Decode a single raw node.

    Raises:
        MalformedSpecialValueError: If any node in the subtree is malformed.
        UnrecognizedResourceTypeError: Strict policy, unregistered type.
    """
    variant = classify(node)

    if isinstance(variant, ScalarNode):
        return Decoded(variant.value)

    if isinstance(variant, UnknownNode):
        return Decoded(None, known=False)

    if isinstance(variant, SequenceNode):
        children = [decode_node(item, resolver) for item in variant.items]
        return _collapse([c.value for c in children], children)

    if isinstance(variant, MapNode):
        decoded = {k: decode_node(v, resolver) for k, v in variant.fields.items()}
        return _collapse({k: c.value for k, c in decoded.items()}, list(decoded.values()))

    if isinstance(variant, SecretNode):
        inner = decode_node(variant.value, resolver)
        return Decoded(
            inner.value if inner.known else None,
            secret=True,
            known=inner.known,
            deps=inner.all_deps,
        )

    if isinstance(variant, ResourceRefNode):
        handle = resolver.resolve(variant.urn, variant.id)
        return Decoded(handle, deps=frozenset({variant.urn}))

    if isinstance(variant, OutputValueNode):
        return Decoded(_seal(variant, resolver), sealed=True)

    raise TypeError(f"Unhandled node variant: {variant!r}")  # pragma: no cover


def _collapse(structure: Any, children: list[Decoded]) -> Decoded:
    """Apply the composite collapse rules to decoded children."""
    known = all(c.known for c in children)
    secret = any(c.secret for c in children)
    deps: frozenset[str] = _EMPTY.union(*(c.all_deps for c in children))

    if not known:
        # Secrecy is kept even though the value is discarded.
        return Decoded(None, secret=secret, known=False, deps=deps)
    if secret:
        return Decoded(structure, secret=True, deps=deps)
    return Decoded(structure, latent_deps=deps)


def _seal(variant: OutputValueNode, resolver: ResourceReferenceResolver) -> DeferredOutputValue:
    """Turn an output-value wrapper into an output, sealing its subtree."""
    deps = dict.fromkeys(variant.dependencies)
    secret = variant.secret
    known = variant.has_value
    value: Any = ABSENT
    if variant.has_value:
        inner = decode_node(variant.value, resolver)
        deps.update(dict.fromkeys(sorted(inner.all_deps)))
        secret = secret or inner.secret
        known = inner.known
        if known:
            value = inner.value
    return DeferredOutputValue(
        value,
        is_known=known,
        is_secret=secret,
        dependencies=deps,
        resources=resolver.handles,
    )


def _declared_dependencies(name: str, urns: Any) -> frozenset[str]:
    if urns is None:
        return _EMPTY
    if isinstance(urns, (str, bytes, Mapping)) or not isinstance(urns, Iterable):
        raise InvalidDependenciesError(name, urns)
    declared = list(urns)
    if not all(isinstance(urn, str) for urn in declared):
        raise InvalidDependenciesError(name, urns)
    return frozenset(declared)


def _is_self_reference(value: Any, deps: frozenset[str]) -> bool:
    """A bare resource handle whose only dependency is itself."""
    return isinstance(value, ResourceHandle) and deps <= {value.urn_value}


class PropertyDecoder:
    """Decodes property bags against a registry and configuration.

    Each ``decode`` call is an independent pass with its own resolver.
    """

    def __init__(
        self,
        registry: ResourceRegistry | None = None,
        config: DecoderConfig | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or DecoderConfig()

    @property
    def config(self) -> DecoderConfig:
        return self._config

    def decode(
        self,
        properties: Mapping[str, Any],
        dependencies: Mapping[str, Iterable[str]] | None = None,
    ) -> dict[str, Any]:
        """Decode every property of a bag.

        Args:
            properties: Property name to raw node.
            dependencies: Property name to declared dependency URNs.

        Returns:
            Property name to decoded value, in input order.

        Raises:
            MalformedSpecialValueError: Anywhere in the bag; no partial
                result is returned.
            InvalidDependenciesError: If a property's declared dependencies
                are not a list of URN strings.
        """
        resolver = ResourceReferenceResolver(self._registry, self._config)
        dependencies = dependencies or {}
        result: dict[str, Any] = {}
        for name, raw in properties.items():
            declared = _declared_dependencies(name, dependencies.get(name))
            result[name] = self._decode_property(name, raw, declared, resolver)
        return result

    def _decode_property(
        self,
        name: str,
        raw: Any,
        declared: frozenset[str],
        resolver: ResourceReferenceResolver,
    ) -> Any:
        decoded = decode_node(raw, resolver)

        if decoded.sealed:
            # The property is itself an output; declared deps join its own.
            output: DeferredOutputValue = decoded.value
            output._add_dependencies(sorted(declared))
            logger.debug("Property '%s': output value", name)
            return output

        deps = decoded.deps | declared
        if decoded.known and not decoded.secret:
            if not deps:
                return decoded.value
            if contains_outputs(decoded.value) or _is_self_reference(decoded.value, deps):
                logger.debug("Property '%s': kept as-is despite dependencies", name)
                return decoded.value

        logger.debug(
            "Property '%s': wrapped (known=%s, secret=%s, deps=%d)",
            name, decoded.known, decoded.secret, len(deps | decoded.latent_deps),
        )
        return DeferredOutputValue(
            decoded.value if decoded.known else ABSENT,
            is_known=decoded.known,
            is_secret=decoded.secret,
            dependencies=sorted(deps | decoded.latent_deps),
            resources=resolver.handles,
        )


def decode(
    properties: Mapping[str, Any],
    dependencies: Mapping[str, Iterable[str]] | None = None,
    *,
    registry: ResourceRegistry | None = None,
    config: DecoderConfig | None = None,
) -> dict[str, Any]:
    """Decode a property bag. See PropertyDecoder.decode."""
    return PropertyDecoder(registry, config).decode(properties, dependencies)
