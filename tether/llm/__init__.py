from .provider import (
    ChatMessage,
    ChatResponse,
    LLMError,
    LLMRateLimitError,
    LLMAuthError,
    LLMBadRequestError,
    LLMEmptyResponseError,
)
from .anthropic import AnthropicProvider

__all__ = [
    "ChatMessage",
    "ChatResponse",
    "LLMError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMBadRequestError",
    "LLMEmptyResponseError",
    "AnthropicProvider",
]
