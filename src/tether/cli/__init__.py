"""Tether CLI -- inspect how engine property bags decode.

This module is NEVER imported from tether/__init__.py.
It is only loaded via the ``tether`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

try:
    import click
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install tether[cli]"
    ) from None

from dotenv import load_dotenv

from tether.cli.formatting import format_error, get_console


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log decode decisions to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Tether: decode engine property bags into tracked outputs."""
    load_dotenv()
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _load_json(path: str) -> Any:
    """Read a JSON document, exiting with a formatted error on failure."""
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        format_error(f"Cannot read {path}: {e}", get_console())
        raise SystemExit(1) from None


def _load_bag(path: str) -> dict[str, Any]:
    data = _load_json(path)
    if not isinstance(data, dict):
        format_error(f"{path} must contain a JSON object of properties", get_console())
        raise SystemExit(1)
    return data


# Register subcommands after cli group is defined
from tether.cli.commands.decode import decode  # noqa: E402
from tether.cli.commands.classify import classify  # noqa: E402

cli.add_command(decode)
cli.add_command(classify)
