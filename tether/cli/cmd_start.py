"""Bridge start command."""

import asyncio
import logging

import click

from . import cli
from .shared import console


@cli.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def start(debug):
    """Start the Telegram ↔ Claude bridge."""
    from tether.config import load_settings
    from tether.main import run, setup_logging

    settings = load_settings()
    setup_logging(settings.log_file, debug or settings.debug)

    console.print("[bold blue]Starting Tether bridge...[/bold blue]")
    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")
    except ValueError as e:
        logging.getLogger("tether").critical(str(e))
        raise click.ClickException(str(e))
