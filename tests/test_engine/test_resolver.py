"""Tests for resource reference resolution."""

from __future__ import annotations

import pytest

from tests.fakes import TEST_ID, TEST_URN, FakeProvider, FakeResource
from tether.engine.resolver import ResourceReferenceResolver
from tether.exceptions import InvalidURNError, UnrecognizedResourceTypeError
from tether.models.config import DecoderConfig, UnknownTypePolicy
from tether.registry import ResourceRegistry, register_resource_module
from tether.resources import ComponentResourceHandle, DependencyResource

STRICT = DecoderConfig(unknown_type_policy=UnknownTypePolicy.STRICT)
PROVIDER_URN = "urn:pulumi:stack::project::pulumi:providers:test::prov"


class TestResolve:
    @pytest.mark.asyncio
    async def test_module_constructor(self, registry) -> None:
        handle = ResourceReferenceResolver(registry).resolve(TEST_URN, TEST_ID)
        assert isinstance(handle, FakeResource)
        assert handle.resource_name == "name"
        assert handle.resource_type == "test:index:TestResource"
        assert await handle.urn.resolve() == TEST_URN
        assert await handle.id.resolve() == TEST_ID

    @pytest.mark.asyncio
    async def test_provider_constructor(self, registry) -> None:
        handle = ResourceReferenceResolver(registry).resolve(PROVIDER_URN, "prov-id")
        assert isinstance(handle, FakeProvider)
        assert handle.package == "test"
        assert handle.reference == f"{PROVIDER_URN}::prov-id"

    def test_package_scope_fallback(self) -> None:
        reg = ResourceRegistry()
        reg.register("comp", lambda name, type_, urn: ComponentResourceHandle(type_, name, urn=urn))
        urn = "urn:pulumi:stack::project::comp:widgets:Widget::w"
        handle = ResourceReferenceResolver(reg).resolve(urn)
        assert isinstance(handle, ComponentResourceHandle)
        assert handle.resource_type == "comp:widgets:Widget"

    def test_module_scope_wins_over_package(self, registry) -> None:
        registry.register("test", lambda name, type_, urn: ComponentResourceHandle(type_, name, urn=urn))
        handle = ResourceReferenceResolver(registry).resolve(TEST_URN, TEST_ID)
        assert isinstance(handle, FakeResource)

    def test_fixture_handles_match_test_classes(self, registry) -> None:
        handle = ResourceReferenceResolver(registry).resolve(TEST_URN, TEST_ID)
        assert type(handle) is FakeResource
        assert handle == FakeResource("name", urn=TEST_URN)

    def test_memoises_by_urn(self, registry) -> None:
        resolver = ResourceReferenceResolver(registry)
        first = resolver.resolve(TEST_URN, TEST_ID)
        assert resolver.resolve(TEST_URN, TEST_ID) is first
        assert resolver.handles == {TEST_URN: first}

    def test_uses_default_registry(self) -> None:
        from tests.fakes import FakeModule

        register_resource_module("test", "index", FakeModule())
        handle = ResourceReferenceResolver().resolve(TEST_URN, TEST_ID)
        assert isinstance(handle, FakeResource)

    def test_constructor_errors_propagate(self, registry) -> None:
        urn = "urn:pulumi:stack::project::test:index:Other::o"
        with pytest.raises(ValueError, match="unknown resource type"):
            ResourceReferenceResolver(registry).resolve(urn)


class TestUnregistered:
    def test_dependency_policy(self, empty_registry) -> None:
        handle = ResourceReferenceResolver(empty_registry).resolve(TEST_URN, TEST_ID)
        assert isinstance(handle, DependencyResource)
        assert handle.urn_value == TEST_URN

    def test_strict_policy(self, empty_registry) -> None:
        resolver = ResourceReferenceResolver(empty_registry, STRICT)
        with pytest.raises(UnrecognizedResourceTypeError) as exc_info:
            resolver.resolve(TEST_URN, TEST_ID)
        assert exc_info.value.urn == TEST_URN

    def test_invalid_urn_dependency_policy(self, registry) -> None:
        handle = ResourceReferenceResolver(registry).resolve("fakeURN")
        assert isinstance(handle, DependencyResource)

    def test_invalid_urn_strict_policy(self, registry) -> None:
        with pytest.raises(InvalidURNError):
            ResourceReferenceResolver(registry, STRICT).resolve("fakeURN")
