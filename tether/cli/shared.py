"""Shared utilities for Tether CLI commands."""

from rich.console import Console

console = Console()
