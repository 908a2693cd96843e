"""Tether — bridge entry point."""

import asyncio
import logging
from typing import Optional

from .bridge import TelegramBridge
from .communication.telegram import TelegramClient, TokenPool, parse_token_array
from .config import TetherSettings, load_settings
from .conversation import ConversationStore
from .llm.anthropic import AnthropicProvider

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("tether")


def setup_logging(log_file: Optional[str] = None, debug: bool = False):
    """Console logging, plus a file when configured."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]  # stderr
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=_log_format,
        handlers=handlers,
    )
    # httpx logs every request at INFO, including the bot token in the URL
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_bridge(settings: TetherSettings) -> TelegramBridge:
    """Wire settings into a ready-to-run bridge.

    Raises:
        ValueError: no bot tokens configured.
    """
    tokens = parse_token_array(settings.token_array)
    if not tokens:
        raise ValueError(
            "No Telegram bot tokens configured. Set TOKEN_ARRAY (e.g. '[token1, token2]')."
        )

    telegram = TelegramClient(
        TokenPool(tokens),
        api_url=settings.telegram_api_url,
        poll_timeout=settings.poll_timeout,
    )
    provider = AnthropicProvider(
        chat_model=settings.model,
        api_key=settings.anthropic_api_key,
        max_tokens=settings.max_tokens,
    )
    logger.info(f"Loaded {len(tokens)} bot token(s); model {settings.model}")

    return TelegramBridge(
        telegram,
        provider,
        conversations=ConversationStore(settings.history_limit),
        system_prompt=settings.system_prompt,
        command=settings.command,
        retry_delay=settings.retry_delay,
    )


async def run(settings: Optional[TetherSettings] = None):
    """Main run loop."""
    settings = settings or load_settings()
    bridge = build_bridge(settings)

    try:
        await bridge.run_forever()
    except asyncio.CancelledError:
        pass
    finally:
        await bridge.telegram.close()
        logger.info("Bridge stopped.")


def main():
    """Entry point."""
    settings = load_settings()
    setup_logging(settings.log_file, settings.debug)
    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        pass
    except ValueError as e:
        logger.critical(str(e))
        raise SystemExit(1)


if __name__ == "__main__":
    main()
