"""Mention policy commands."""

import asyncio
import click

from . import cli
from .shared import console, fail, load_roster

from rich.panel import Panel
from rich.table import Table


def _envelope_options(fn):
    fn = click.option("--participants", "participants_path", type=click.Path(), help="Roster JSON file")(fn)
    fn = click.option("--mentioned", multiple=True, help="Protocol-level mentioned JID (repeatable)")(fn)
    fn = click.option("--sender-e164", default=None, help="Sender phone number (+E164)")(fn)
    fn = click.option("--sender", "sender_jid", default=None, help="Sender JID")(fn)
    return fn


def _build_envelope(settings, body, sender_jid, sender_e164, mentioned, participants_path):
    from wamention.policy import InboundEnvelope

    return InboundEnvelope(
        body=body,
        sender_jid=sender_jid,
        sender_e164=sender_e164,
        mentioned_jids=list(mentioned),
        participants=load_roster(participants_path, settings),
    )


@cli.command()
@click.argument("body")
@_envelope_options
@click.pass_obj
def policy(settings, body, sender_jid, sender_e164, mentioned, participants_path):
    """Show who a reply to BODY may mention."""
    from wamention.policy import compute_policy

    try:
        envelope = _build_envelope(settings, body, sender_jid, sender_e164, mentioned, participants_path)
    except Exception as e:
        fail(e)

    result = compute_policy(envelope)
    if result is None:
        console.print("[yellow]No policy — replies are not restricted.[/yellow]")
        return

    table = Table(title="Mention policy", show_header=True)
    table.add_column("Allowed user", style="bold")
    table.add_column("Preferred JID")
    for user, jid in zip(sorted(result.allowed_users), result.allowed_jids()):
        table.add_row(user, jid)
    console.print(table)


@cli.command()
@click.argument("body")
@click.argument("draft")
@_envelope_options
@click.pass_obj
def reply(settings, body, draft, sender_jid, sender_e164, mentioned, participants_path):
    """Apply BODY's policy to reply DRAFT and show what would be sent."""
    async def _reply():
        from wamention.lookup import build_lookup
        from wamention.policy import compute_policy, resolve_outbound_mentions

        envelope = _build_envelope(settings, body, sender_jid, sender_e164, mentioned, participants_path)
        return await resolve_outbound_mentions(
            draft,
            policy=compute_policy(envelope),
            lookup=build_lookup(settings),
            participants=envelope.participants,
        )

    try:
        outbound = asyncio.run(_reply())
    except Exception as e:
        fail(e)

    console.print(Panel(outbound.text or "[dim](empty)[/dim]", title="Outgoing text"))
    if outbound.mention_jids:
        console.print("Mentions: " + ", ".join(outbound.mention_jids))
    else:
        console.print("[dim]No mentions attached.[/dim]")
