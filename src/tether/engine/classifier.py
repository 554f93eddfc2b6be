"""Protocol value classification.

Maps a raw decoded node (scalar, list, dict) to exactly one Variant based on
the reserved signature key. This is the only place that inspects raw shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tether.exceptions import MalformedSpecialValueError
from tether.models.nodes import (
    KNOWN_SIGNATURES,
    RESOURCE_SIG,
    SECRET_SIG,
    SIG_KEY,
    UNKNOWN_VALUE,
    MapNode,
    OutputValueNode,
    ResourceRefNode,
    ScalarNode,
    SecretNode,
    SequenceNode,
    UnknownNode,
    Variant,
)


def classify(node: Any) -> Variant:
    """Classify a raw node.

    Args:
        node: A value from the decoded wire tree.

    Returns:
        The matching Variant.

    Raises:
        MalformedSpecialValueError: If the signature key is present with an
            unrecognized signature, or a sigil's fields are malformed.
    """
    if isinstance(node, str):
        if node == UNKNOWN_VALUE:
            return UnknownNode()
        return ScalarNode(node)
    if isinstance(node, Mapping):
        if SIG_KEY not in node:
            return MapNode(dict(node))
        return _classify_special(node)
    if isinstance(node, (list, tuple)):
        return SequenceNode(tuple(node))
    return ScalarNode(node)


def _classify_special(node: Mapping[str, Any]) -> Variant:
    sig = node[SIG_KEY]
    if not isinstance(sig, str) or sig not in KNOWN_SIGNATURES:
        raise MalformedSpecialValueError(sig)

    if sig == SECRET_SIG:
        return SecretNode(node.get("value"))

    if sig == RESOURCE_SIG:
        urn = node.get("urn")
        if not isinstance(urn, str) or not urn:
            raise MalformedSpecialValueError(sig, "resource reference requires a string 'urn'")
        ref_id = node.get("id")
        if ref_id is not None and not isinstance(ref_id, str):
            raise MalformedSpecialValueError(sig, "resource reference 'id' must be a string")
        # An empty id means the referenced resource has no ID (e.g. a component).
        return ResourceRefNode(urn=urn, id=ref_id or None)

    # Output value
    secret = node.get("secret", False)
    if not isinstance(secret, bool):
        raise MalformedSpecialValueError(sig, "output value 'secret' must be a bool")
    deps = node.get("dependencies") or []
    if not isinstance(deps, (list, tuple)) or not all(isinstance(d, str) for d in deps):
        raise MalformedSpecialValueError(
            sig, "output value 'dependencies' must be a list of URNs"
        )
    return OutputValueNode(
        value=node.get("value"),
        has_value="value" in node,
        secret=secret,
        dependencies=tuple(deps),
    )


def is_rpc_secret(node: Any) -> bool:
    """Return True if the raw node is a secret wrapper."""
    return isinstance(node, Mapping) and node.get(SIG_KEY) == SECRET_SIG


def unwrap_rpc_secret(node: Any) -> Any:
    """Return the inner value of a raw secret wrapper, or the node unchanged."""
    if not is_rpc_secret(node):
        return node
    return node.get("value")
