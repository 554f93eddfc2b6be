"""CLI tests for Tether -- tests both commands via Click's CliRunner.

Each test writes its property bag into runner.isolated_filesystem().
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from tether.cli import cli
from tether.models.nodes import (
    SIG_KEY,
    UNKNOWN_VALUE,
    output_value_node,
    resource_ref_node,
    secret_node,
)

URN = "urn:pulumi:stack::project::test:index:TestResource::name"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    """Create a Click test runner with a wide terminal so table cells do not wrap."""
    return CliRunner(env={"COLUMNS": "200"})


def _write(path: str, data) -> str:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return path


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------

class TestDecode:
    def test_plain_and_output_properties(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {
                "plain": {"a": 1},
                "wrapped": output_value_node("hi", dependencies=[URN]),
                "hidden": secret_node("hunter2"),
                "pending": UNKNOWN_VALUE,
            })
            result = runner.invoke(cli, ["decode", "bag.json"])
        assert result.exit_code == 0, result.output
        assert "plain" in result.output
        assert "output('hi')" in result.output
        assert "[secret]" in result.output
        assert "hunter2" not in result.output
        assert "<unknown>" in result.output

    def test_declared_deps(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {"name": "web"})
            _write("deps.json", {"name": [URN]})
            result = runner.invoke(cli, ["decode", "bag.json", "--deps", "deps.json"])
        assert result.exit_code == 0, result.output
        assert "output" in result.output

    def test_deps_must_be_lists(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {"name": "web"})
            _write("deps.json", {"name": URN})
            result = runner.invoke(cli, ["decode", "bag.json", "--deps", "deps.json"])
        assert result.exit_code == 1
        assert "must be a list of URN" in result.output

    def test_resource_reference_falls_back(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {"ref": resource_ref_node(URN, "id-1")})
            result = runner.invoke(cli, ["decode", "bag.json"])
        assert result.exit_code == 0, result.output
        assert "resource" in result.output

    def test_strict_fails_on_unregistered_type(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {"ref": resource_ref_node(URN, "id-1")})
            result = runner.invoke(cli, ["decode", "bag.json", "--strict"])
        assert result.exit_code == 1
        assert "Unrecognized resource type" in result.output

    def test_malformed_value(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {"bad": {SIG_KEY: "nope"}})
            result = runner.invoke(cli, ["decode", "bag.json"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_non_object_bag(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", [1, 2])
            result = runner.invoke(cli, ["decode", "bag.json"])
        assert result.exit_code == 1
        assert "JSON object" in result.output

    def test_empty_bag(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {})
            result = runner.invoke(cli, ["decode", "bag.json"])
        assert result.exit_code == 0
        assert "No properties." in result.output


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------

class TestClassify:
    def test_variants(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {
                "a": "x",
                "b": [1],
                "c": secret_node("s"),
                "d": UNKNOWN_VALUE,
            })
            result = runner.invoke(cli, ["classify", "bag.json"])
        assert result.exit_code == 0, result.output
        for variant in ("ScalarNode", "SequenceNode", "SecretNode", "UnknownNode"):
            assert variant in result.output

    def test_malformed(self, runner) -> None:
        with runner.isolated_filesystem():
            _write("bag.json", {"bad": {SIG_KEY: "nope"}})
            result = runner.invoke(cli, ["classify", "bag.json"])
        assert result.exit_code == 1
        assert "bad" in result.output
