"""Domain models for LLM call results and token usage tracking."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LLMCallResult:
    """Result from a single LLM API call (Value Object).

    Attributes:
        model: The model name used for the API call.
        prompt_tokens: Number of tokens in the prompt/input.
        completion_tokens: Number of tokens in the completion/output.
        total_tokens: Total tokens used (prompt + completion).
        estimated_cost: Estimated cost in USD based on model pricing.
        provider: Optional provider name (e.g., "openai", "anthropic", "gemini").
    """
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    estimated_cost: float
    provider: str | None = field(default=None)

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
            "estimated_cost": self.estimated_cost,
            "provider": self.provider,
        }


def accumulate_stats(*stats_list: LLMCallResult | None) -> LLMCallResult | None:
    """Accumulate multiple LLMCallResults into one.

    Args:
        *stats_list: Variable number of LLMCallResult (None values are ignored).

    Returns:
        Combined stats, single stats if only one valid, or None if all None.
        The model of a combined result is the last model used.
    """
    valid = [s for s in stats_list if s is not None]
    if not valid:
        return None
    if len(valid) == 1:
        return valid[0]
    return LLMCallResult(
        model=valid[-1].model,
        prompt_tokens=sum(s.prompt_tokens for s in valid),
        completion_tokens=sum(s.completion_tokens for s in valid),
        total_tokens=sum(s.total_tokens for s in valid),
        estimated_cost=sum(s.estimated_cost for s in valid),
        provider=valid[-1].provider,
    )
