"""wamention CLI — inspect mention resolution and tagging policy."""

import click
from wamention import __version__
from wamention.config import MentionSettings, load_settings
from .shared import configure_logging, console


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="wamention")
@click.option("--debug", is_flag=True, help="Verbose logging")
@click.pass_context
def cli(ctx, debug):
    """wamention — WhatsApp mention resolution and tagging policy"""
    overrides = {"debug": True} if debug else {}
    # Handlers first, so load_settings warnings come out formatted
    configure_logging(MentionSettings(**overrides))
    ctx.obj = load_settings(**overrides)
    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands."""
    console.print(f"[bold]wamention v{__version__}[/bold] — mention resolution and tagging policy\n")

    commands = [
        ("extract TEXT", "Show @number and @name tokens found in TEXT"),
        ("resolve TEXT", "Resolve TEXT to mention JIDs"),
        ("policy BODY", "Show the mention policy for an inbound message"),
        ("reply BODY DRAFT", "Final reply text and mentions under the policy"),
    ]
    for name, desc in commands:
        console.print(f"    [bold]wamention {name:18s}[/bold] {desc}")
    console.print()
    console.print("[dim]Run 'wamention <command> --help' for details on a specific command.[/dim]")


from . import cmd_extract  # noqa: E402, F401
from . import cmd_resolve  # noqa: E402, F401
from . import cmd_policy  # noqa: E402, F401


def main():
    """CLI entry point."""
    import sys
    try:
        cli(standalone_mode=False)
    except click.UsageError as e:
        if e.ctx:
            click.echo(e.ctx.command.get_usage(e.ctx), err=True)
        click.echo("Try 'wamention --help' for help.\n", err=True)
        click.echo(f"Error: {e.format_message()}", err=True)
        sys.exit(2)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.exceptions.Exit as e:
        sys.exit(e.code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
