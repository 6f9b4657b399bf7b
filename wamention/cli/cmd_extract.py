"""Token extraction command."""

import click

from . import cli
from .shared import console

from rich.table import Table


@cli.command()
@click.argument("text")
def extract(text):
    """Show mention tokens in TEXT. No roster, no lookups."""
    from wamention.extract import extract_mention_jids, extract_name_mentions

    numeric = extract_mention_jids(text)
    names = extract_name_mentions(text)
    if not numeric and not names:
        console.print("[dim]No mention tokens found.[/dim]")
        return

    table = Table(title="Mention tokens", show_header=True)
    table.add_column("Kind", style="bold")
    table.add_column("Value")
    for jid in numeric:
        table.add_row("number", jid)
    for name in names:
        table.add_row("name", name)
    console.print(table)
