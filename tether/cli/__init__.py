"""Tether CLI — command line interface."""

import click
from tether import __version__
from .shared import console


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="tether")
@click.pass_context
def cli(ctx):
    """Tether — prompt flag hook and Telegram ↔ Claude bridge"""
    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands grouped by category."""
    console.print(f"[bold]Tether v{__version__}[/bold] — prompt flag hook and Telegram ↔ Claude bridge\n")

    groups = {
        "Bridge": [
            ("start", "Start the Telegram bridge (long-poll loop)"),
        ],
        "Prompt hook": [
            ("hook", "Read a prompt event from stdin, print context blocks"),
            ("flags", "List prompt flags and their aliases"),
        ],
    }

    for category, commands in groups.items():
        console.print(f"  [bold cyan]{category}[/bold cyan]")
        for name, desc in commands:
            console.print(f"    [bold]tether {name:10s}[/bold] {desc}")
        console.print()

    console.print("[dim]Run 'tether <command> --help' for details on a specific command.[/dim]")


# Import all command modules (registers commands onto cli group)
from . import cmd_start  # noqa: E402, F401
from . import cmd_hook  # noqa: E402, F401


@cli.command(name="help", hidden=True)
def help_cmd():
    """Show all available commands."""
    _show_help()


def main():
    """CLI entry point.

    Commands end with ``ctx.exit(code)``; outside standalone mode click
    hands that code back instead of exiting, so it is applied here. The
    prompt hook relies on this to report failures with exit code 1.
    """
    import sys
    try:
        code = cli(standalone_mode=False)
    except click.UsageError as e:
        if e.ctx:
            click.echo(e.ctx.command.get_usage(e.ctx), err=True)
        click.echo("Try 'tether help' for help.\n", err=True)
        click.echo(f"Error: {e.format_message()}", err=True)
        sys.exit(2)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(code if isinstance(code, int) else 0)
