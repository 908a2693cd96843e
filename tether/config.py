"""Tether configuration management."""

import os
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_HOOK_LOG_DIR = os.path.expanduser("~/.tether/logs")

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant on Telegram. "
    "Be concise and direct in your responses."
)


class TetherSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Telegram: one or more bot tokens, rotated on rate limit
    token_array: str = Field(
        default="",
        validation_alias=AliasChoices("TETHER_TOKEN_ARRAY", "TOKEN_ARRAY"),
        description="Bot tokens: 'a,b' or '[a, b]'",
    )
    telegram_api_url: str = Field(
        default="https://api.telegram.org", description="Bot API base URL"
    )
    command: str = Field(default="claude", description="Command name without slash")
    poll_timeout: int = Field(default=30, description="getUpdates long-poll wait (seconds)")
    retry_delay: float = Field(default=5.0, description="Pause after a failed fetch (seconds)")
    history_limit: int = Field(default=20, description="Turns kept per chat")

    # Anthropic
    anthropic_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TETHER_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
        description="Anthropic API key",
    )
    model: str = Field(default="claude-sonnet-4-5-20250929", description="Chat model")
    max_tokens: int = Field(default=4096, description="Max output tokens per reply")
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        validation_alias=AliasChoices("TETHER_SYSTEM_PROMPT", "SYSTEM_PROMPT"),
        description="System instruction sent with every request",
    )

    # Prompt hook
    hook_log_dir: str = Field(
        default=DEFAULT_HOOK_LOG_DIR,
        description="Directory for the prompt hook JSONL log",
    )

    # Process logging
    log_file: Optional[str] = Field(default=None, description="Optional bridge log file")
    debug: bool = Field(default=False, description="Debug mode")

    model_config = {
        "env_prefix": "TETHER_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }


def load_settings() -> TetherSettings:
    """Load settings from environment."""
    settings = TetherSettings()

    import logging
    logger = logging.getLogger("tether.config")
    if not settings.system_prompt.strip():
        logger.warning("SYSTEM_PROMPT is blank — falling back to the default instruction.")
        settings.system_prompt = DEFAULT_SYSTEM_PROMPT

    return settings
