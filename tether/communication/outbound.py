"""Outbound message processing before delivery to Telegram."""

from telegram.constants import MessageLimit

# Telegram rejects text messages longer than this
MAX_MESSAGE_LENGTH = MessageLimit.MAX_TEXT_LENGTH
ELLIPSIS = "..."


def truncate_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis.

    Texts that already fit are returned unchanged.
    """
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS
