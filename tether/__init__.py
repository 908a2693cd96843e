"""Tether — prompt flag hook and Telegram ↔ Claude bridge."""

__version__ = "0.3.0"
