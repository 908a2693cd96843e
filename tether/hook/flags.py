"""Flag token extraction from the edges of a prompt.

Flags are dash-prefixed words (``-u``, ``-debug``, ``-plan_first``) at the
end and/or the start of a prompt::

    "fix bug -u -debug"   -> flags ["u", "debug"], prompt "fix bug"
    "-p -v fix bug"       -> flags ["p", "v"],     prompt "fix bug"

Dashes inside the text ("re-run", "x -y z") are left alone.
"""

import re
from dataclasses import dataclass, field

_TOKEN = r"-[A-Za-z_]+"

# Run of flag tokens at the end; first token preceded by whitespace or start
_TRAILING_RE = re.compile(rf"(?:^|(?<=\s)){_TOKEN}(?:\s+{_TOKEN})*\s*$")

# Run of flag tokens at the start; last token followed by whitespace or end
_LEADING_RE = re.compile(rf"^\s*{_TOKEN}(?:\s+{_TOKEN})*(?=\s|$)\s*")

_TOKEN_RE = re.compile(_TOKEN)


@dataclass
class ParsedPrompt:
    cleaned: str
    flags: list[str] = field(default_factory=list)


def _identifiers(run: str) -> list[str]:
    return [token[1:] for token in _TOKEN_RE.findall(run)]


def parse_flags(prompt: str) -> ParsedPrompt:
    """Split ``prompt`` into the cleaned text and its flag identifiers.

    The trailing run is read first, then the leading run. Identifiers keep
    first-seen order; repeats are dropped.
    """
    flags: list[str] = []
    text = prompt

    match = _TRAILING_RE.search(text)
    if match:
        for ident in _identifiers(match.group(0)):
            if ident not in flags:
                flags.append(ident)
        text = text[: match.start()].rstrip()

    match = _LEADING_RE.match(text)
    if match:
        for ident in _identifiers(match.group(0)):
            if ident not in flags:
                flags.append(ident)
        text = text[match.end():]

    return ParsedPrompt(cleaned=text.strip(), flags=flags)
