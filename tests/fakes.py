"""Fake resource classes shared by fixtures and tests.

Kept out of conftest.py so that tests and fixtures see the same classes.
"""

from __future__ import annotations

from tether.registry import ResourceRegistry
from tether.resources import CustomResourceHandle, ProviderResourceHandle, ResourceHandle

TEST_TYPE = "test:index:TestResource"
TEST_URN = "urn:pulumi:stack::project::test:index:TestResource::name"
TEST_ID = "name_id"


class FakeResource(CustomResourceHandle):
    """Custom resource constructed by the test module."""

    def __init__(self, name: str, *, urn: str) -> None:
        super().__init__(TEST_TYPE, name, urn=urn)


class FakeProvider(ProviderResourceHandle):
    pass


class FakeModule:
    """ResourceModule for ``test:index``."""

    def construct(self, name: str, type_: str, urn: str) -> ResourceHandle:
        if type_ == TEST_TYPE:
            return FakeResource(name, urn=urn)
        raise ValueError(f"unknown resource type {type_}")


class FakePackage:
    """ResourcePackage for the ``test`` provider."""

    def construct_provider(self, name: str, type_: str, urn: str) -> ResourceHandle:
        return FakeProvider(type_, name, urn=urn)


def make_registry() -> ResourceRegistry:
    """Registry with the test module and package registered."""
    reg = ResourceRegistry()
    reg.register_module("test", "index", FakeModule())
    reg.register_package("test", FakePackage())
    return reg
