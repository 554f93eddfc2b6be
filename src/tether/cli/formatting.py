"""Terminal rendering for decoded property bags.

One table row per property showing its kind, knownness, secrecy and
dependency URNs, plus the variant listing used by ``tether classify``.
Secret payloads never reach this module unmasked.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape
from rich.table import Table


@dataclass(frozen=True)
class PropertyRow:
    """One decoded property, flattened for display."""

    name: str
    kind: str  # "plain", "output" or "resource"
    known: bool
    secret: bool
    dependencies: list[str] = field(default_factory=list)
    rendered: str = ""


def get_console() -> Console:
    """Console on stdout; plain text when not attached to a terminal."""
    return Console(stderr=False)


def format_properties(rows: list[PropertyRow], console: Console) -> None:
    """Display decoded properties in a table."""
    if not rows:
        console.print("[dim]No properties.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Property", style="cyan")
    table.add_column("Kind", width=8)
    table.add_column("Known", justify="center")
    table.add_column("Secret", justify="center")
    table.add_column("Dependencies", style="dim")
    table.add_column("Value")

    for row in rows:
        table.add_row(
            escape(row.name),
            row.kind,
            "[green]yes[/green]" if row.known else "[yellow]no[/yellow]",
            "[red]yes[/red]" if row.secret else "no",
            escape(", ".join(row.dependencies)),
            escape(row.rendered),
        )

    console.print(table)


def format_variants(variants: dict[str, str], console: Console) -> None:
    """Display the classified variant of each property."""
    if not variants:
        console.print("[dim]No properties.[/dim]")
        return
    for name, variant in variants.items():
        console.print(f"  [cyan]{escape(name)}[/cyan]: {variant}")


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {message}", highlight=False)
