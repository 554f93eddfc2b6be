"""Output detection.

Callers use ``contains_outputs`` to decide whether a decoded value needs
further wrapping. Resource handles are opaque to the scan: their own fields
are outputs, but a handle is never treated as containing one.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tether.output import DeferredOutputValue
from tether.resources import ResourceHandle


def contains_outputs(value: Any) -> bool:
    """Return True if ``value`` is, or structurally contains, an output."""
    if isinstance(value, DeferredOutputValue):
        return True
    if isinstance(value, ResourceHandle):
        return False
    if isinstance(value, (list, tuple)):
        return any(contains_outputs(v) for v in value)
    if isinstance(value, Mapping):
        return any(contains_outputs(v) for v in value.values())
    return False
