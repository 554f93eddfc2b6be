"""Wire constants and raw node variants.

The engine marks special values inside an otherwise plain JSON-like tree
with a reserved signature key. The classifier turns every raw node into
exactly one of the variants below; nothing downstream looks at the raw
shape again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

# ---------------------------------------------------------------------------
# Reserved wire contract (must match the engine byte-for-byte)
# ---------------------------------------------------------------------------

SIG_KEY = "4dabf18193072939515e22adb298388d"
"""Key whose presence marks a map as a special value."""

SECRET_SIG = "1b47061264138c4ac30d75fd1eb44270"
RESOURCE_SIG = "5cf8f73096256a8f31e491e813e4eb8e"
OUTPUT_VALUE_SIG = "d0e6a833031e9bbcd3f4e8bde6ca49a4"

UNKNOWN_VALUE = "04da6b54-80e4-46f7-96ec-b56ff0331ba9"
"""Sentinel string the engine sends for values not yet known (previews)."""

KNOWN_SIGNATURES: frozenset[str] = frozenset({SECRET_SIG, RESOURCE_SIG, OUTPUT_VALUE_SIG})


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScalarNode:
    """Any non-container value that is not the unknown sentinel."""

    value: Any


@dataclass(frozen=True)
class SequenceNode:
    """A list (or tuple) of raw nodes."""

    items: tuple[Any, ...]


@dataclass(frozen=True)
class MapNode:
    """A string-keyed map without the signature key."""

    fields: dict[str, Any]


@dataclass(frozen=True)
class SecretNode:
    """A secret wrapper around a raw value."""

    value: Any


@dataclass(frozen=True)
class ResourceRefNode:
    """A reference to a resource by URN (and ID, for custom resources)."""

    urn: str
    id: str | None = None


@dataclass(frozen=True)
class OutputValueNode:
    """An explicit output value with its own secrecy and dependencies.

    ``has_value`` is False when the wire map had no ``value`` key, which
    means the output is unknown.
    """

    value: Any = None
    has_value: bool = False
    secret: bool = False
    dependencies: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UnknownNode:
    """The unknown sentinel."""


Variant = Union[
    ScalarNode,
    SequenceNode,
    MapNode,
    SecretNode,
    ResourceRefNode,
    OutputValueNode,
    UnknownNode,
]


# ---------------------------------------------------------------------------
# Wire builders (used by tests and by callers assembling fixtures)
# ---------------------------------------------------------------------------


def secret_node(value: Any) -> dict[str, Any]:
    """Build the wire form of a secret."""
    return {SIG_KEY: SECRET_SIG, "value": value}


def resource_ref_node(urn: str, id: str | None = None) -> dict[str, Any]:
    """Build the wire form of a resource reference."""
    node: dict[str, Any] = {SIG_KEY: RESOURCE_SIG, "urn": urn}
    if id:
        node["id"] = id
    return node


_MISSING = object()


def output_value_node(
    value: Any = _MISSING,
    secret: bool = False,
    dependencies: list[str] | None = None,
) -> dict[str, Any]:
    """Build the wire form of an output value. Omit ``value`` for unknown."""
    node: dict[str, Any] = {SIG_KEY: OUTPUT_VALUE_SIG}
    if value is not _MISSING:
        node["value"] = value
    if secret:
        node["secret"] = True
    if dependencies:
        node["dependencies"] = list(dependencies)
    return node
