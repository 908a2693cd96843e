"""Provider-agnostic LLM types."""

from dataclasses import dataclass
from typing import Optional


# ════════════════════════════════════════════════════════
# LLM Exception Hierarchy — classify errors by type,
# not by string matching.  bridge.py catches these.
# ════════════════════════════════════════════════════════

class LLMError(Exception):
    """Base class for all LLM provider errors."""
    pass

class LLMRateLimitError(LLMError):
    """429 — rate limited after all retries exhausted."""
    pass

class LLMAuthError(LLMError):
    """401/403 — authentication or authorization failure."""
    pass

class LLMBadRequestError(LLMError):
    """400 — bad request (malformed conversation, oversized prompt, etc.)."""
    pass

class LLMEmptyResponseError(LLMError):
    """LLM returned no text content."""
    pass


@dataclass
class ChatMessage:
    role: str           # 'system', 'user', 'assistant'
    content: str


@dataclass
class ChatResponse:
    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: Optional[str] = None
