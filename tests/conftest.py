"""Shared test fixtures for Tether.

Provides an isolated resource registry with a test module registered under
``test:index`` and helpers for inspecting decoded outputs. The fake
resource classes themselves live in tests/fakes.py.
"""

from __future__ import annotations

from typing import Any

import pytest

from tests.fakes import make_registry
from tether.output import DeferredOutputValue
from tether.registry import ResourceRegistry, reset_resource_registry


@pytest.fixture
def registry() -> ResourceRegistry:
    """Fresh registry with the test module and package registered."""
    return make_registry()


@pytest.fixture
def empty_registry() -> ResourceRegistry:
    return ResourceRegistry()


@pytest.fixture(autouse=True)
def _clean_default_registry():
    """Keep the process-wide registry empty between tests."""
    reset_resource_registry()
    yield
    reset_resource_registry()


# ------------------------------------------------------------------
# Shared test helpers
# ------------------------------------------------------------------

async def assert_output(
    actual: Any,
    value: Any,
    known: bool,
    secret: bool,
    deps: list[str] | None = None,
) -> None:
    """Assert that ``actual`` is an output with the given payload and flags."""
    assert isinstance(actual, DeferredOutputValue)
    assert await actual.resolve() == value
    assert actual.is_known is known
    assert actual.is_secret is secret
    resources = await actual.dependent_resources()
    assert {r.urn_value for r in resources} == set(deps or [])
    assert actual.dependencies == frozenset(deps or [])
