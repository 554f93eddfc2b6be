"""URN parsing.

Engine URNs look like::

    urn:pulumi:<stack>::<project>::<qualified-type>::<name>

where ``<qualified-type>`` is a ``$``-separated chain of parent types
ending in the resource's own type token (``pkg:mod:Type``).
"""

from __future__ import annotations

from dataclasses import dataclass

from tether.exceptions import InvalidURNError

URN_PREFIX = "urn:pulumi:"
PROVIDER_PREFIX = "pulumi:providers:"


@dataclass(frozen=True)
class ParsedURN:
    """The components of a resource URN."""

    urn: str
    stack: str
    project: str
    qualified_type: str
    name: str

    @property
    def type(self) -> str:
        """The resource's own type token (last segment of the qualified type)."""
        return self.qualified_type.rsplit("$", 1)[-1]

    @property
    def is_provider(self) -> bool:
        return self.type.startswith(PROVIDER_PREFIX)

    @property
    def package(self) -> str:
        """Package component of the type token.

        For provider types (``pulumi:providers:aws``) this is the package the
        provider serves, not ``pulumi``.
        """
        if self.is_provider:
            return self.type[len(PROVIDER_PREFIX):]
        return self.type.split(":", 1)[0]

    @property
    def module(self) -> str | None:
        """Module component of the type token, or None for provider types."""
        if self.is_provider:
            return None
        parts = self.type.split(":")
        return parts[1] if len(parts) == 3 else None


def parse_urn(urn: str) -> ParsedURN:
    """Split a URN into its components.

    Raises:
        InvalidURNError: If the URN does not follow the grammar above.
    """
    if not isinstance(urn, str) or not urn.startswith(URN_PREFIX):
        raise InvalidURNError(urn)
    # The name is everything after the third separator; it may contain "::".
    parts = urn[len(URN_PREFIX):].split("::", 3)
    if len(parts) != 4 or not all(parts[:3]):
        raise InvalidURNError(urn)
    stack, project, qualified_type, name = parts
    if len(qualified_type.rsplit("$", 1)[-1].split(":")) != 3:
        raise InvalidURNError(urn)
    return ParsedURN(
        urn=urn,
        stack=stack,
        project=project,
        qualified_type=qualified_type,
        name=name,
    )
