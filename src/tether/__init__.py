"""Tether: decode engine property bags into tracked outputs.

Values sent by the orchestration engine carry three facts besides their
data: whether they are known yet, whether they are secret, and which
resources they depend on. Tether rebuilds those values as plain data,
resource handles and DeferredOutputValues.
"""

from tether._version import __version__

# Core entry points
from tether.engine.decoder import Decoded, PropertyDecoder, decode, decode_node
from tether.engine.scan import contains_outputs

# Classification
from tether.engine.classifier import classify, is_rpc_secret, unwrap_rpc_secret
from tether.engine.urn import ParsedURN, parse_urn

# Resolution
from tether.engine.resolver import ResourceReferenceResolver
from tether.registry import (
    ResourceRegistry,
    default_registry,
    register_resource_module,
    register_resource_package,
    reset_resource_registry,
)

# Outputs and resources
from tether.output import DeferredOutputValue, is_output
from tether.resources import (
    ComponentResourceHandle,
    CustomResourceHandle,
    DependencyResource,
    ProviderResourceHandle,
    ResourceHandle,
    is_resource,
)

# Models and protocols
from tether.models.config import DecoderConfig, UnknownTypePolicy
from tether.models.nodes import UNKNOWN_VALUE
from tether.protocols import ResourceConstructor, ResourceModule, ResourcePackage

# Exceptions
from tether.exceptions import (
    InvalidDependenciesError,
    InvalidURNError,
    MalformedSpecialValueError,
    RegistrationError,
    TetherError,
    UnrecognizedResourceTypeError,
)

__all__ = [
    "__version__",
    # Core
    "decode",
    "decode_node",
    "Decoded",
    "PropertyDecoder",
    "contains_outputs",
    # Classification
    "classify",
    "is_rpc_secret",
    "unwrap_rpc_secret",
    "parse_urn",
    "ParsedURN",
    "UNKNOWN_VALUE",
    # Resolution
    "ResourceReferenceResolver",
    "ResourceRegistry",
    "default_registry",
    "register_resource_module",
    "register_resource_package",
    "reset_resource_registry",
    # Outputs and resources
    "DeferredOutputValue",
    "is_output",
    "ResourceHandle",
    "CustomResourceHandle",
    "ComponentResourceHandle",
    "ProviderResourceHandle",
    "DependencyResource",
    "is_resource",
    # Config and protocols
    "DecoderConfig",
    "UnknownTypePolicy",
    "ResourceConstructor",
    "ResourceModule",
    "ResourcePackage",
    # Exceptions
    "TetherError",
    "MalformedSpecialValueError",
    "UnrecognizedResourceTypeError",
    "InvalidDependenciesError",
    "InvalidURNError",
    "RegistrationError",
]
