"""In-memory implementation of LLMPort for testing."""

import asyncio
from dataclasses import dataclass
from typing import Any

from domain.model.completion import FinishReason, LLMCompletion
from domain.model.token_usage import LLMCallResult


@dataclass
class FakeReply:
    """One scripted reply. ``delay`` is slept before answering."""
    text: str = "{}"
    finish_reason: FinishReason = FinishReason.STOP
    delay: float = 0.0


class FakeLLMAdapter:
    """Fake LLM adapter that returns preconfigured responses.

    ``replies`` are consumed in order, one per call; the last one repeats
    once the script is exhausted. An exception in the script is raised
    instead of answering.
    """

    def __init__(
        self,
        response: str = "{}",
        replies: list[FakeReply | Exception | str] | None = None,
        stats: LLMCallResult | None = None,
        configured: bool = True,
    ):
        self._replies: list[FakeReply | Exception | str] = list(replies) if replies else [response]
        self._stats = stats
        self._configured = configured
        self.calls: list[dict] = []

    @property
    def is_configured(self) -> bool:
        return self._configured

    async def generate(
        self,
        messages: list[dict[str, str]],
        model: str,
        max_tokens: int,
        temperature: float = 0.1,
        response_schema: dict[str, Any] | None = None,
        timeout: float = 30.0,
    ) -> LLMCompletion:
        self.calls.append({
            "messages": messages,
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "response_schema": response_schema,
            "timeout": timeout,
        })
        index = min(len(self.calls) - 1, len(self._replies) - 1)
        reply = self._replies[index]
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            reply = FakeReply(text=reply)
        if reply.delay:
            await asyncio.sleep(reply.delay)

        stats = self._stats or LLMCallResult(
            model=model,
            prompt_tokens=10,
            completion_tokens=5,
            total_tokens=15,
            estimated_cost=0.0001,
        )
        return LLMCompletion(
            text=reply.text,
            finish_reason=reply.finish_reason,
            stats=stats,
            raw_finish_reason=reply.finish_reason.value,
        )
