"""Prompt flag hook — parse flags, inject context blocks."""

from .flags import ParsedPrompt, parse_flags
from .injector import Injection, build_injection, is_trivial
from .runner import run_hook

__all__ = [
    "ParsedPrompt",
    "parse_flags",
    "Injection",
    "build_injection",
    "is_trivial",
    "run_hook",
]
