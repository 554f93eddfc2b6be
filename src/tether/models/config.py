"""Configuration models for Tether.

DecoderConfig holds per-decoder settings.
UnknownTypePolicy controls what happens to resource references whose type
has no registered constructor.
"""

from __future__ import annotations

import enum
import os

from pydantic import BaseModel

ENV_UNKNOWN_TYPE_POLICY = "TETHER_UNKNOWN_TYPE_POLICY"


class UnknownTypePolicy(str, enum.Enum):
    """Action to take when a resource reference's type is not registered."""

    STRICT = "strict"  # raise UnrecognizedResourceTypeError
    DEPENDENCY = "dependency"  # degrade to a DependencyResource


class DecoderConfig(BaseModel):
    """Per-decoder configuration."""

    model_config = {"frozen": True}

    unknown_type_policy: UnknownTypePolicy = UnknownTypePolicy.DEPENDENCY

    @property
    def strict(self) -> bool:
        return self.unknown_type_policy is UnknownTypePolicy.STRICT

    @classmethod
    def from_env(cls) -> DecoderConfig:
        """Build a config from ``TETHER_*`` environment variables.

        Unset variables fall back to the field defaults. An invalid policy
        name raises pydantic's ValidationError.
        """
        values: dict[str, str] = {}
        policy = os.environ.get(ENV_UNKNOWN_TYPE_POLICY)
        if policy:
            values["unknown_type_policy"] = policy.strip().lower()
        return cls.model_validate(values)
