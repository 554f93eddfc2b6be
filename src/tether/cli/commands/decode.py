"""tether decode -- decode a JSON property bag and show the result."""

from __future__ import annotations

import asyncio
from typing import Any

import click
from pydantic import ValidationError

from tether.cli.formatting import PropertyRow, format_error, format_properties, get_console
from tether.exceptions import TetherError
from tether.models.config import DecoderConfig, UnknownTypePolicy
from tether.output import DeferredOutputValue
from tether.resources import ResourceHandle


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--deps", "deps_path", default=None, type=click.Path(exists=True, dir_okay=False), help="JSON object mapping property names to dependency URNs.")
@click.option("--strict", is_flag=True, help="Fail on resource types with no registered constructor.")
def decode(path: str, deps_path: str | None, strict: bool) -> None:
    """Decode the property bag in PATH."""
    from tether.cli import _load_bag
    from tether.engine.decoder import PropertyDecoder

    console = get_console()
    properties = _load_bag(path)
    dependencies = _load_bag(deps_path) if deps_path else None
    try:
        config = DecoderConfig.from_env()
        if strict:
            config = config.model_copy(update={"unknown_type_policy": UnknownTypePolicy.STRICT})
        decoded = PropertyDecoder(config=config).decode(properties, dependencies)
        rows = asyncio.run(describe(decoded))
    except (TetherError, ValidationError) as e:
        format_error(str(e), console)
        raise SystemExit(1) from None
    format_properties(rows, console)


async def describe(decoded: dict[str, Any]) -> list[PropertyRow]:
    """Flatten decoded properties into display rows, resolving payloads."""
    rows: list[PropertyRow] = []
    for name, value in decoded.items():
        if isinstance(value, DeferredOutputValue):
            rows.append(PropertyRow(
                name=name,
                kind="output",
                known=value.is_known,
                secret=value.is_secret,
                dependencies=sorted(value.dependencies),
                rendered=await render(value),
            ))
        else:
            rows.append(PropertyRow(
                name=name,
                kind="resource" if isinstance(value, ResourceHandle) else "plain",
                known=True,
                secret=False,
                rendered=await render(value),
            ))
    return rows


async def render(value: Any) -> str:
    """Render a decoded value as text. Secrets are masked."""
    if isinstance(value, DeferredOutputValue):
        if not value.is_known:
            return "<unknown>"
        if value.is_secret:
            return "[secret]"
        return f"output({await render(await value.resolve())})"
    if isinstance(value, ResourceHandle):
        return f"<{value.resource_type or 'dependency'} {value.urn_value}>"
    if isinstance(value, (list, tuple)):
        items = [await render(v) for v in value]
        return "[" + ", ".join(items) + "]"
    if isinstance(value, dict):
        items = [f"{k!r}: {await render(v)}" for k, v in value.items()]
        return "{" + ", ".join(items) + "}"
    return repr(value)
