"""Tether exception hierarchy.

All Tether-specific exceptions inherit from TetherError.
"""


class TetherError(Exception):
    """Base exception for all Tether errors."""


class MalformedSpecialValueError(TetherError):
    """Raised when a node carries the signature key with an unusable payload.

    Either the signature value is not one of the recognized signatures, or
    a recognized sigil is missing a required field (e.g. a resource
    reference without a string ``urn``). Aborts the whole decode call.
    """

    def __init__(self, signature: object, reason: str | None = None) -> None:
        self.signature = signature
        self.reason = reason
        msg = f"Malformed special value with signature {signature!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class UnrecognizedResourceTypeError(TetherError):
    """Raised when a resource reference's type has no registered constructor.

    Only raised under the strict unknown-type policy; the dependency policy
    degrades to a DependencyResource instead.
    """

    def __init__(self, type_token: str, urn: str) -> None:
        self.type_token = type_token
        self.urn = urn
        super().__init__(
            f"Unrecognized resource type '{type_token}' (urn: {urn}). "
            f"Register a resource module or package for it first."
        )


class InvalidURNError(TetherError):
    """Raised when a URN does not follow the engine's URN grammar."""

    def __init__(self, urn: str) -> None:
        self.urn = urn
        super().__init__(f"Invalid URN: {urn!r}")


class RegistrationError(TetherError):
    """Raised when a different constructor is registered under a taken key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            f"A resource constructor is already registered for '{key}'. "
            f"Reset the registry first to re-register."
        )


class InvalidDependenciesError(TetherError):
    """Raised when a property's declared dependencies are not a list of URNs.

    A bare string is rejected rather than being read as a sequence of
    characters.
    """

    def __init__(self, name: str, value: object) -> None:
        self.name = name
        self.value = value
        super().__init__(
            f"Declared dependencies for property '{name}' must be a list of URN "
            f"strings, got {type(value).__name__}: {value!r}"
        )
