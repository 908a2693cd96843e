"""Anthropic Claude provider — Messages API over httpx."""

import asyncio
import logging
import os
from typing import Optional

import httpx

from .provider import (
    ChatMessage,
    ChatResponse,
    LLMAuthError,
    LLMBadRequestError,
    LLMEmptyResponseError,
    LLMError,
    LLMRateLimitError,
)

logger = logging.getLogger("tether.llm.anthropic")

# Anthropic Messages API
ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"
_BETA_HEADER = "oauth-2025-04-20"


class AnthropicProvider:
    """Anthropic Claude provider using an API key.

    Key sources (priority order):
    1. Explicit ``api_key`` argument (from settings)
    2. Environment (ANTHROPIC_API_KEY)
    """

    DEFAULT_MAX_TOKENS = 4096

    def __init__(
        self,
        chat_model: str = "claude-sonnet-4-5-20250929",
        api_key: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: Optional[float] = None,
        api_url: str = ANTHROPIC_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.chat_model = chat_model
        self.max_tokens = max_tokens
        self.api_url = api_url
        self._api_key = api_key
        self._timeout = timeout  # None = wait as long as the API takes
        self._transport = transport

    def _load_token(self) -> str:
        token = self._api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not token:
            raise LLMAuthError(
                "No Anthropic credentials found. Set the ANTHROPIC_API_KEY environment variable."
            )
        return token

    @staticmethod
    def _build_headers(token: str) -> dict:
        headers = {
            "anthropic-version": ANTHROPIC_API_VERSION,
            "content-type": "application/json",
        }
        # OAuth tokens go in Authorization and require the beta header
        if token.startswith("sk-ant-oat"):
            headers["Authorization"] = f"Bearer {token}"
            headers["anthropic-beta"] = _BETA_HEADER
        else:
            headers["x-api-key"] = token
        return headers

    @staticmethod
    def _sanitize_conversation(conversation: list[dict]) -> list[dict]:
        """Make a conversation acceptable to the Messages API.

        Anthropic requires the first message to come from the user and
        roles to alternate. History trimming can leave an assistant turn
        at the front, and a failed reply leaves two user turns in a row.

        Leading assistant turns are dropped and consecutive same-role
        turns are merged with a newline.
        """
        start = 0
        while start < len(conversation) and conversation[start].get("role") != "user":
            start += 1
        if start:
            logger.debug(f"Dropping {start} leading non-user message(s)")

        merged: list[dict] = []
        for msg in conversation[start:]:
            if merged and merged[-1]["role"] == msg["role"]:
                merged[-1]["content"] = merged[-1]["content"] + "\n" + msg["content"]
            else:
                merged.append({"role": msg["role"], "content": msg["content"]})
        return merged

    async def chat(
        self,
        messages: list[ChatMessage],
        system: Optional[str] = None,
    ) -> ChatResponse:
        conversation = self._sanitize_conversation(
            [{"role": m.role, "content": m.content or ""} for m in messages]
        )
        if not conversation:
            raise LLMBadRequestError("Conversation has no user message")

        body: dict = {
            "model": self.chat_model,
            "messages": conversation,
            "max_tokens": self.max_tokens,
        }
        if system:
            body["system"] = system

        headers = self._build_headers(self._load_token())

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            for attempt in range(2):
                resp = await client.post(self.api_url, json=body, headers=headers)

                if resp.status_code == 429:
                    if attempt < 1:
                        logger.warning(f"Rate limited (429), retrying in 1s (attempt {attempt + 1}/2)")
                        await asyncio.sleep(1)
                        continue
                    raise LLMRateLimitError("Rate limited (429) after 2 attempts")

                if resp.status_code in (401, 403):
                    raise LLMAuthError(
                        f"Anthropic rejected the credentials ({resp.status_code}). "
                        "Check ANTHROPIC_API_KEY."
                    )

                if resp.status_code == 400:
                    error_text = resp.text[:500]
                    logger.error(f"Anthropic 400 Bad Request: {error_text}")
                    raise LLMBadRequestError(f"Anthropic API error 400: {error_text}")

                if 500 <= resp.status_code < 600:
                    error_text = resp.text[:500]
                    logger.error(f"Anthropic {resp.status_code} Server Error: {error_text}")
                    if attempt < 1:
                        logger.warning(f"Server error ({resp.status_code}), retrying in 1s (attempt {attempt + 1}/2)")
                        await asyncio.sleep(1)
                        continue
                    raise LLMError(f"Anthropic API error {resp.status_code}: {error_text}")

                resp.raise_for_status()
                break

        try:
            data = resp.json()
        except ValueError:
            raise LLMError(f"Non-JSON response from Anthropic (HTTP {resp.status_code}): {resp.text[:200]}")
        if not isinstance(data, dict):
            raise LLMError(f"Unexpected Anthropic response: {str(data)[:200]}")

        content_text = ""
        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                content_text += block.get("text") or ""

        if not content_text.strip():
            raise LLMEmptyResponseError(
                f"Empty completion (stop_reason={data.get('stop_reason')})"
            )

        usage = data.get("usage") or {}

        return ChatResponse(
            content=content_text,
            model=data.get("model") or self.chat_model,
            input_tokens=usage.get("input_tokens", 0),
            output_tokens=usage.get("output_tokens", 0),
            stop_reason=data.get("stop_reason"),
        )
