"""Resolve command."""

import asyncio
import click

from . import cli
from .shared import console, fail, load_roster


@cli.command()
@click.argument("text")
@click.option("--participants", "participants_path", type=click.Path(), help="Roster JSON file")
@click.pass_obj
def resolve(settings, text, participants_path):
    """Resolve TEXT to the JIDs it mentions."""
    async def _resolve():
        from wamention.lookup import build_lookup
        from wamention.resolver import resolve_mention_jids

        roster = load_roster(participants_path, settings)
        return await resolve_mention_jids(text, lookup=build_lookup(settings), participants=roster)

    try:
        jids = asyncio.run(_resolve())
    except Exception as e:
        fail(e)

    if not jids:
        console.print("[dim]No mentions resolved.[/dim]")
        return
    for jid in jids:
        console.print(f"[green]✓[/green] {jid}")
