"""Tether domain models.

Re-exports key models for convenient access.
"""

from tether.models.config import DecoderConfig, UnknownTypePolicy
from tether.models.nodes import (
    KNOWN_SIGNATURES,
    OUTPUT_VALUE_SIG,
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
    output_value_node,
    resource_ref_node,
    secret_node,
)

__all__ = [
    # Wire constants
    "SIG_KEY",
    "SECRET_SIG",
    "RESOURCE_SIG",
    "OUTPUT_VALUE_SIG",
    "UNKNOWN_VALUE",
    "KNOWN_SIGNATURES",
    # Variants
    "ScalarNode",
    "SequenceNode",
    "MapNode",
    "SecretNode",
    "ResourceRefNode",
    "OutputValueNode",
    "UnknownNode",
    "Variant",
    # Wire builders
    "secret_node",
    "resource_ref_node",
    "output_value_node",
    # Config
    "UnknownTypePolicy",
    "DecoderConfig",
]
