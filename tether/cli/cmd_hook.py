"""Prompt hook commands."""

import sys

import click
from rich.table import Table

from . import cli
from .shared import console


@cli.command()
@click.option("--log-dir", default=None, help="Override the JSONL log directory")
@click.pass_context
def hook(ctx, log_dir):
    """Read a prompt event (JSON) from stdin and print context blocks."""
    from tether.hook.runner import run_hook

    ctx.exit(run_hook(sys.stdin, sys.stdout, sys.stderr, log_dir))


@cli.command()
def flags():
    """List prompt flags and their aliases."""
    from tether.hook.blocks import FLAGS

    table = Table(title="Prompt flags", show_lines=False)
    table.add_column("Flag", style="bold")
    table.add_column("Aliases")
    table.add_column("Injects")

    for flag in FLAGS:
        table.add_row(
            f"-{flag.name}",
            ", ".join(f"-{a}" for a in flag.aliases),
            flag.summary,
        )

    console.print(table)
    console.print("[dim]Flags go at the start or end of a prompt. Type 'hh' alone for the reference.[/dim]")
