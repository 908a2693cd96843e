"""Inbound command parsing — extract the user's text from a bot command."""

import re
from functools import lru_cache
from typing import Optional

DEFAULT_COMMAND = "claude"


@lru_cache(maxsize=8)
def command_pattern(command: str = DEFAULT_COMMAND) -> re.Pattern:
    """Compile the matcher for ``/<command>`` with an optional ``@botname``.

    At least one whitespace character must separate the command from the
    text, and the text must contain something other than whitespace.
    """
    return re.compile(rf"^/{re.escape(command)}(?:@\w+)?\s+(\S[\s\S]*)")


def parse_command(text: Optional[str], command: str = DEFAULT_COMMAND) -> Optional[str]:
    """Return the trimmed text after the command, or None if it doesn't match.

    >>> parse_command("/claude  hello there ")
    'hello there'
    >>> parse_command("/claude@my_bot hi")
    'hi'
    >>> parse_command("/claude") is None
    True
    """
    if not text:
        return None
    match = command_pattern(command).match(text)
    if not match:
        return None
    return match.group(1).strip() or None
