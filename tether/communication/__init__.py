"""Communication sub-core — Telegram transport and message shaping.

- Commands: extract user text from ``/claude ...`` messages
- Outbound: trim replies to the platform length limit
- Telegram: Bot API client with bot token rotation
"""

from .commands import parse_command
from .outbound import truncate_message, MAX_MESSAGE_LENGTH
from .telegram import (
    TelegramClient,
    TokenPool,
    TelegramError,
    TelegramAPIError,
    TelegramRateLimitError,
    parse_token_array,
    is_rate_limited,
)

__all__ = [
    # Commands
    "parse_command",
    # Outbound
    "truncate_message",
    "MAX_MESSAGE_LENGTH",
    # Telegram
    "TelegramClient",
    "TokenPool",
    "TelegramError",
    "TelegramAPIError",
    "TelegramRateLimitError",
    "parse_token_array",
    "is_rate_limited",
]
