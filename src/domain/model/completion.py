"""Raw completion returned by an LLM port."""

from dataclasses import dataclass
from enum import Enum

from domain.model.token_usage import LLMCallResult


class FinishReason(str, Enum):
    """Why the provider stopped generating."""
    STOP = "stop"
    MAX_TOKENS = "max_tokens"
    OTHER = "other"


@dataclass(frozen=True)
class LLMCompletion:
    """Text produced by one generation call.

    ``raw_finish_reason`` keeps the provider's own value for logging.
    """
    text: str
    finish_reason: FinishReason
    stats: LLMCallResult
    raw_finish_reason: str | None = None
