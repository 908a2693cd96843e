"""Context injection — turn a raw prompt into the blocks to prepend.

Output order is fixed::

    [date] [git branch] [default standards] [flag blocks in flag order]
"""

import datetime
import re
from dataclasses import dataclass, field
from typing import Optional

from .blocks import HELP, STANDARDS, STANDARDS_FLAG, Flag, resolve
from .context import branch_block, date_block
from .flags import ParsedPrompt, parse_flags

HELP_SHORTCUT = "hh"

# Prompts that don't need engineering standards. Case-insensitive,
# anchored at the start of the cleaned prompt.
TRIVIAL_PATTERNS: list[re.Pattern] = [
    # Shell-style listing/status commands
    re.compile(r"^(?:ls|ll|la|pwd|tree|git\s+(?:status|log|diff|branch))\b", re.IGNORECASE),
    # Greetings and acknowledgements
    re.compile(r"^(?:hi|hello|hey|thanks|thank\s+you|thx|ok|okay)\b", re.IGNORECASE),
    # Quick question
    re.compile(r"^\?"),
    # Read-only requests
    re.compile(r"^(?:show|list|get)\b", re.IGNORECASE),
]


@dataclass
class Injection:
    parsed: ParsedPrompt
    applied_flags: list[str] = field(default_factory=list)
    blocks: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.blocks)


def is_trivial(prompt: str) -> bool:
    return any(p.match(prompt) for p in TRIVIAL_PATTERNS)


def is_help_shortcut(prompt: str) -> bool:
    return prompt.strip().lower() == HELP_SHORTCUT


def build_injection(
    prompt: str,
    cwd: str,
    today: Optional[datetime.date] = None,
) -> Injection:
    """Compute every block to inject for ``prompt`` run from ``cwd``."""
    if is_help_shortcut(prompt):
        return Injection(
            parsed=ParsedPrompt(cleaned="", flags=[]),
            applied_flags=["help"],
            blocks=[date_block(today), HELP],
        )

    parsed = parse_flags(prompt)
    injection = Injection(parsed=parsed)
    injection.blocks.append(date_block(today))

    branch = branch_block(cwd)
    if branch:
        injection.blocks.append(branch)

    resolved: list[tuple[str, Flag]] = []
    for ident in parsed.flags:
        flag = resolve(ident)
        if flag is not None:
            resolved.append((ident, flag))

    explicit_standards = any(flag is STANDARDS_FLAG for _, flag in resolved)
    if not explicit_standards and not is_trivial(parsed.cleaned):
        injection.blocks.append(STANDARDS)

    seen: set[str] = set()
    for ident, flag in resolved:
        injection.applied_flags.append(ident)
        # -u -ultrathink selects one block, not two
        if flag.name in seen:
            continue
        seen.add(flag.name)
        injection.blocks.append(flag.render(cwd))

    return injection
