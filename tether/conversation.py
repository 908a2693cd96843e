"""Conversation store — short per-chat history kept in memory."""

import logging
from collections import deque
from typing import Union

from .llm.provider import ChatMessage

logger = logging.getLogger("tether.conversation")

MAX_HISTORY = 20

ChatId = Union[int, str]


class ConversationStore:
    """Bounded turn history per chat.

    Each chat gets a deque capped at ``max_turns``; appending past the cap
    evicts the oldest turn. Histories are created on first use and live as
    long as the process.
    """

    def __init__(self, max_turns: int = MAX_HISTORY):
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self.max_turns = max_turns
        self._chats: dict[ChatId, deque[ChatMessage]] = {}

    def history(self, chat_id: ChatId) -> deque[ChatMessage]:
        if chat_id not in self._chats:
            logger.debug(f"New conversation for chat {chat_id}")
            self._chats[chat_id] = deque(maxlen=self.max_turns)
        return self._chats[chat_id]

    def append(self, chat_id: ChatId, role: str, content: str):
        if role not in ("user", "assistant"):
            raise ValueError(f"Unsupported role: {role}")
        self.history(chat_id).append(ChatMessage(role=role, content=content))

    def messages(self, chat_id: ChatId) -> list[ChatMessage]:
        """Snapshot of the chat's history, oldest first."""
        return list(self.history(chat_id))

    @property
    def chat_count(self) -> int:
        return len(self._chats)
