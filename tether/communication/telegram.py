"""Telegram Bot API client — long-poll updates, send messages, rotate bot tokens.

Several bot tokens can be configured. When getUpdates answers with a
rate-limit error (error_code 429) the client moves on to the next token
and retries immediately, at most once per token per call.
"""

import logging
from typing import Iterable, Optional

import httpx
from telegram.constants import ParseMode

logger = logging.getLogger("tether.telegram")

TELEGRAM_API_URL = "https://api.telegram.org"
RATE_LIMIT_ERROR_CODE = 429


# ════════════════════════════════════════════════════════
# Errors
# ════════════════════════════════════════════════════════

class TelegramError(Exception):
    """Base class for Telegram client errors."""
    pass

class TelegramRateLimitError(TelegramError):
    """Every configured token answered getUpdates with 429."""
    pass

class TelegramAPIError(TelegramError):
    """Bot API answered with ok=false (other than 429) or a non-JSON body."""
    pass


# ════════════════════════════════════════════════════════
# Token pool
# ════════════════════════════════════════════════════════

def parse_token_array(raw: Optional[str]) -> list[str]:
    """Parse a delimited token list from the environment.

    Accepts ``a,b``, ``[a, b]``, ``[a,b];`` and quoted entries
    (``["a", "b"]``). Blank entries are dropped.
    """
    if not raw:
        return []
    raw = raw.strip()
    if raw.startswith("["):
        raw = raw[1:]
    if raw.endswith(";"):
        raw = raw[:-1].rstrip()
    if raw.endswith("]"):
        raw = raw[:-1]

    tokens = []
    for part in raw.split(","):
        part = part.strip().strip("'\"").strip()
        if part:
            tokens.append(part)
    return tokens


class TokenPool:
    """Ordered bot tokens plus a cursor that wraps around on rotation."""

    def __init__(self, tokens: Iterable[str]):
        self._tokens = [t for t in tokens if t]
        if not self._tokens:
            raise ValueError("TokenPool needs at least one bot token")
        self._index = 0

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> str:
        return self._tokens[self._index]

    def rotate(self) -> str:
        """Advance to the next token (wrapping to the first) and return it."""
        self._index = (self._index + 1) % len(self._tokens)
        return self.current


def is_rate_limited(data) -> bool:
    """True only when a Bot API body reports error_code 429.

    Success, any other error code and bodies that aren't JSON objects are
    all treated as final. A revoked or mistyped token (401/404) therefore
    stops the rotation instead of cycling through the pool.
    """
    if not isinstance(data, dict):
        return False
    if data.get("ok"):
        return False
    return data.get("error_code") == RATE_LIMIT_ERROR_CODE


def _mask(token: str) -> str:
    """Bot id part only. The secret half of a token is never logged."""
    return token.split(":", 1)[0] + ":***"


# ════════════════════════════════════════════════════════
# Client
# ════════════════════════════════════════════════════════

class TelegramClient:
    """Minimal Bot API client over httpx."""

    def __init__(
        self,
        pool: TokenPool,
        api_url: str = TELEGRAM_API_URL,
        poll_timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.pool = pool
        self.api_url = api_url.rstrip("/")
        self.poll_timeout = poll_timeout
        # Client-side wait covers the server long-poll window plus margin
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(poll_timeout + 5),
            transport=transport,
        )

    def _url(self, method: str, token: Optional[str] = None) -> str:
        return f"{self.api_url}/bot{token or self.pool.current}/{method}"

    async def close(self):
        await self._client.aclose()

    async def _get_json(self, url: str, params: dict) -> dict:
        """GET a Bot API method and return the decoded body.

        Telegram answers errors (429 included) with a JSON body, so HTTP
        error statuses are not raised here; the body is inspected instead.
        Transport errors propagate to the caller.
        """
        resp = await self._client.get(url, params=params)
        try:
            data = resp.json()
        except ValueError:
            raise TelegramAPIError(f"Non-JSON response from Bot API (HTTP {resp.status_code})")
        if not isinstance(data, dict):
            raise TelegramAPIError(f"Unexpected Bot API response: {str(data)[:100]}")
        return data

    async def get_updates(self, offset: int) -> list[dict]:
        """Long-poll for updates starting at ``offset``.

        Rotates through the token pool while the API reports a rate
        limit, trying each token at most once per call.

        Raises:
            TelegramRateLimitError: every token was rate limited.
            TelegramAPIError: any other API-level failure (token not rotated).
            httpx.HTTPError: network-level failure.
        """
        params = {"offset": offset, "timeout": self.poll_timeout}

        for attempt in range(len(self.pool)):
            data = await self._get_json(self._url("getUpdates"), params)

            if is_rate_limited(data):
                previous = self.pool.current
                self.pool.rotate()
                logger.warning(
                    f"getUpdates rate limited on bot {_mask(previous)}, "
                    f"switching to token index {self.pool.index} "
                    f"(attempt {attempt + 1}/{len(self.pool)})"
                )
                continue

            if not data.get("ok"):
                raise TelegramAPIError(
                    f"getUpdates failed: {data.get('error_code')} {data.get('description', '')}".rstrip()
                )

            result = data.get("result")
            if not isinstance(result, list):
                return []
            return [u for u in result if isinstance(u, dict)]

        raise TelegramRateLimitError(
            f"All {len(self.pool)} bot token(s) are rate limited"
        )

    async def send_message(self, chat_id: int, text: str) -> bool:
        """Send ``text`` to ``chat_id`` with Markdown rendering.

        Falls back to plain text once when Telegram can't parse the
        Markdown entities. Failures are logged, never raised.
        """
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": ParseMode.MARKDOWN.value,
        }
        try:
            resp = await self._client.post(self._url("sendMessage"), json=payload)
            if resp.status_code == 400 and "can't parse entities" in resp.text.lower():
                logger.info(f"Markdown rejected for chat {chat_id}, resending as plain text")
                payload.pop("parse_mode")
                resp = await self._client.post(self._url("sendMessage"), json=payload)
            if resp.is_error:
                logger.error(f"sendMessage error: {resp.status_code} {resp.text[:300]}")
                return False
            return True
        except httpx.HTTPError as e:
            logger.error(f"sendMessage error: {type(e).__name__}: {e}")
            return False
