"""Telegram ↔ Claude bridge — sequential long-poll loop.

Updates are handled one at a time, in order. The offset advances past an
update only after its handling finished (successfully or not), so a crash
later in the batch never replays it.
"""

import asyncio
import logging
from typing import Optional

import httpx

from .communication.commands import DEFAULT_COMMAND, parse_command
from .communication.outbound import truncate_message
from .communication.telegram import TelegramClient
from .conversation import ConversationStore
from .llm.anthropic import AnthropicProvider
from .llm.provider import LLMError

logger = logging.getLogger("tether.bridge")

APOLOGY = "Sorry, I could not generate a response."
RETRY_DELAY = 5.0


class TelegramBridge:
    """Relays ``/claude <text>`` messages to Claude and sends the reply back."""

    def __init__(
        self,
        telegram: TelegramClient,
        provider: AnthropicProvider,
        conversations: Optional[ConversationStore] = None,
        system_prompt: Optional[str] = None,
        command: str = DEFAULT_COMMAND,
        retry_delay: float = RETRY_DELAY,
    ):
        self.telegram = telegram
        self.provider = provider
        self.conversations = conversations or ConversationStore()
        self.system_prompt = system_prompt
        self.command = command
        self.retry_delay = retry_delay
        self.offset = 0

    async def ask(self, chat_id) -> Optional[str]:
        """Send the chat's history to Claude. Returns None on any failure."""
        history = self.conversations.messages(chat_id)
        try:
            response = await self.provider.chat(history, system=self.system_prompt)
        except (LLMError, httpx.HTTPError) as e:
            logger.error(f"Claude API error for chat {chat_id}: {type(e).__name__}: {e}")
            return None
        except Exception as e:
            # The user still gets an apology for failures outside the API seam
            logger.error(f"Unexpected error asking Claude for chat {chat_id}: {type(e).__name__}: {e}", exc_info=True)
            return None
        logger.debug(
            f"Reply for chat {chat_id}: {response.output_tokens} output tokens "
            f"(stop_reason={response.stop_reason})"
        )
        return response.content or None

    async def handle_update(self, update: dict):
        message = update.get("message")
        if not message or not message.get("text"):
            return

        user_text = parse_command(message["text"], self.command)
        if not user_text:
            return

        chat_id = message["chat"]["id"]
        logger.info(f"Command from chat {chat_id}: {len(user_text)} chars")

        self.conversations.append(chat_id, "user", user_text)
        reply = await self.ask(chat_id)

        if not reply:
            await self.telegram.send_message(chat_id, APOLOGY)
            return

        self.conversations.append(chat_id, "assistant", reply)
        await self.telegram.send_message(chat_id, truncate_message(reply))

    async def poll_once(self) -> int:
        """Fetch one batch of updates and handle each in order.

        Returns the number of updates consumed. Fetch errors propagate.
        """
        updates = await self.telegram.get_updates(self.offset)

        for update in updates:
            try:
                await self.handle_update(update)
            except Exception as e:
                logger.error(
                    f"Error handling update {update.get('update_id')}: {type(e).__name__}: {e}",
                    exc_info=True,
                )
            update_id = update.get("update_id")
            if isinstance(update_id, int):
                self.offset = max(self.offset, update_id + 1)

        return len(updates)

    async def run_forever(self):
        """Poll until cancelled. Fetch failures pause ``retry_delay`` seconds."""
        logger.info("Bridge started. Polling for updates...")
        while True:
            try:
                await self.poll_once()
            except Exception as e:
                logger.error(f"Polling error: {type(e).__name__}: {e}")
                await asyncio.sleep(self.retry_delay)
