"""tether classify -- show the wire variant of each top-level property."""

from __future__ import annotations

import click

from tether.cli.formatting import format_error, format_variants, get_console
from tether.exceptions import MalformedSpecialValueError


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def classify(path: str) -> None:
    """Classify each property in the property bag at PATH."""
    from tether.cli import _load_bag
    from tether.engine.classifier import classify as classify_node

    console = get_console()
    properties = _load_bag(path)
    variants: dict[str, str] = {}
    for name, raw in properties.items():
        try:
            variants[name] = type(classify_node(raw)).__name__
        except MalformedSpecialValueError as e:
            format_error(f"{name}: {e}", console)
            raise SystemExit(1) from None
    format_variants(variants, console)
