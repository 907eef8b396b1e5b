"""Sentence analysis service — orchestrates model attempts and the response contract.

Pipeline per attempt:
    invoke model → strip fences → parse JSON (or salvage truncated JSON)
    → normalize → validate → AnalysisResult

Attempts run strictly one after another:
    1. base      primary model, base output budget
    2. retry     primary model, larger budget (only after truncated output)
    3. fallback  fallback model (only after timeout/truncation, and only
                 when a distinct fallback model is configured)
Any other failure ends the request immediately.
"""

import logging
import time
from dataclasses import dataclass

from domain.model.analysis import AnalysisResult
from domain.model.errors import (
    AnalysisError,
    ErrorKind,
    MalformedOutputError,
    SchemaInvalidError,
)
from domain.model.schema import analysis_response_schema
from domain.model.token_usage import LLMCallResult, accumulate_stats
from port.llm import LLMPort
from services.model_invoker import invoke_model
from services.response_normalizer import normalize_analysis_payload
from services.response_validator import validate_analysis_payload
from utils.config import Settings
from utils.json_parsing import parse_model_json
from utils.prompts import build_analysis_messages

logger = logging.getLogger(__name__)

PRIMARY_TIMEOUT = 25.0
FALLBACK_TIMEOUT = 22.0
BASE_MAX_TOKENS = 4096
RETRY_MAX_TOKENS = 8192
FALLBACK_MAX_TOKENS = 6144
ANALYSIS_TEMPERATURE = 0.1

TIER_BASE = "base"
TIER_RETRY = "retry"
TIER_FALLBACK = "fallback"


@dataclass(frozen=True)
class AttemptTier:
    """Invocation parameters of one attempt."""
    name: str
    model: str
    timeout: float
    max_tokens: int


@dataclass(frozen=True)
class AttemptRecord:
    """What happened in one attempt."""
    tier: str
    model: str
    max_tokens: int
    outcome: str
    elapsed: float


@dataclass(frozen=True)
class RetryPolicy:
    """Tier table for the analysis request.

    With ``fallback_model == primary_model`` only the base and retry tiers
    exist.
    """
    primary_model: str
    fallback_model: str
    primary_timeout: float = PRIMARY_TIMEOUT
    fallback_timeout: float = FALLBACK_TIMEOUT
    base_max_tokens: int = BASE_MAX_TOKENS
    retry_max_tokens: int = RETRY_MAX_TOKENS
    fallback_max_tokens: int = FALLBACK_MAX_TOKENS

    @classmethod
    def from_settings(cls, settings: Settings) -> 'RetryPolicy':
        return cls(primary_model=settings.primary_model, fallback_model=settings.fallback_model)

    @property
    def has_fallback(self) -> bool:
        return self.fallback_model != self.primary_model

    @property
    def max_attempts(self) -> int:
        return 3 if self.has_fallback else 2

    @property
    def worst_case_timeout(self) -> float:
        """Sum of per-attempt timeouts when every tier runs (base, retry, fallback).

        A request-wide ceiling must exceed this, or it can cancel an attempt
        that is still inside its own budget.
        """
        total = 2 * self.primary_timeout
        if self.has_fallback:
            total += self.fallback_timeout
        return total

    def first_tier(self) -> AttemptTier:
        return AttemptTier(TIER_BASE, self.primary_model, self.primary_timeout, self.base_max_tokens)

    def next_tier(self, current: AttemptTier, error: AnalysisError) -> AttemptTier | None:
        """Tier to try after ``current`` failed with ``error``, or None to give up."""
        if not error.escalates or current.name == TIER_FALLBACK:
            return None

        if current.name == TIER_BASE and error.kind == ErrorKind.TRUNCATED_OUTPUT:
            return AttemptTier(TIER_RETRY, self.primary_model, self.primary_timeout, self.retry_max_tokens)

        if not self.has_fallback:
            return None

        if error.kind == ErrorKind.TRUNCATED_OUTPUT:
            max_tokens = self.retry_max_tokens
        else:
            max_tokens = self.fallback_max_tokens
        return AttemptTier(TIER_FALLBACK, self.fallback_model, self.fallback_timeout, max_tokens)


class AnalysisService:
    """Runs one sentence analysis through the tiered attempt policy.

    Create one instance per request; ``attempts`` and ``token_stats``
    describe the last ``analyze`` call.
    """

    def __init__(self, llm: LLMPort, policy: RetryPolicy, temperature: float = ANALYSIS_TEMPERATURE):
        self.llm = llm
        self.policy = policy
        self.temperature = temperature
        self.attempts: list[AttemptRecord] = []
        self._stats: list[LLMCallResult | None] = []

    @property
    def token_stats(self) -> LLMCallResult | None:
        """Token usage accumulated over all attempts of the last analysis."""
        return accumulate_stats(*self._stats)

    async def analyze(self, sentence: str) -> AnalysisResult:
        """Analyze a sentence, escalating through tiers on timeout/truncation.

        Raises:
            AnalysisError: The last attempt's failure when no tier succeeds.
        """
        self.attempts = []
        self._stats = []
        messages = build_analysis_messages(sentence)
        schema = analysis_response_schema()

        tier = self.policy.first_tier()
        while True:
            started = time.monotonic()
            logger.info("Analysis attempt started", extra={
                "tier": tier.name, "model": tier.model,
                "timeout": tier.timeout, "max_tokens": tier.max_tokens,
            })
            try:
                result = await self._attempt(tier, messages, schema)
            except AnalysisError as e:
                self._record(tier, e.kind.value, started)
                self._stats.append(e.stats)
                next_tier = self.policy.next_tier(tier, e)
                if next_tier is None:
                    logger.error("Analysis failed", extra={
                        "tier": tier.name, "model": tier.model,
                        "errorKind": e.kind.value, "error": str(e),
                        "attempts": len(self.attempts),
                    })
                    self._log_usage()
                    raise
                logger.warning("Escalating analysis to next tier", extra={
                    "from_tier": tier.name, "to_tier": next_tier.name,
                    "to_model": next_tier.model, "errorKind": e.kind.value,
                })
                tier = next_tier
                continue

            self._record(tier, "success", started)
            self._log_usage()
            logger.info("Analysis completed", extra={
                "tier": tier.name, "model": tier.model,
                "word_count": len(result.words), "partial": result.partial,
            })
            return result

    async def _attempt(self, tier: AttemptTier, messages, schema) -> AnalysisResult:
        completion = await invoke_model(
            self.llm,
            model=tier.model,
            messages=messages,
            max_tokens=tier.max_tokens,
            timeout=tier.timeout,
            temperature=self.temperature,
            response_schema=schema,
        )

        parsed = parse_model_json(completion.text)
        if parsed is None:
            logger.error("JSON parse failed and repair unsuccessful", extra={
                "model": tier.model, "content_preview": completion.text[:500],
            })
            error = MalformedOutputError("Incomplete response from model, please try again", tier.model)
            error.stats = completion.stats
            raise error

        if parsed.repaired:
            words = parsed.data.get("words") if isinstance(parsed.data, dict) else None
            logger.warning("Repaired truncated JSON response, trailing words dropped", extra={
                "model": tier.model,
                "salvaged_words": len(words) if isinstance(words, list) else None,
            })

        payload = normalize_analysis_payload(parsed.data)
        validation = validate_analysis_payload(payload)
        if not validation:
            logger.error("Model response failed validation", extra={
                "model": tier.model,
                "field_path": validation.field_path,
                "reason": validation.reason,
            })
            error = SchemaInvalidError(validation.field_path, validation.reason, tier.model)
            error.stats = completion.stats
            raise error

        self._stats.append(completion.stats)
        return AnalysisResult.create(payload, partial=parsed.repaired, model=tier.model)

    def _record(self, tier: AttemptTier, outcome: str, started: float) -> None:
        self.attempts.append(AttemptRecord(
            tier=tier.name,
            model=tier.model,
            max_tokens=tier.max_tokens,
            outcome=outcome,
            elapsed=time.monotonic() - started,
        ))

    def _log_usage(self) -> None:
        stats = self.token_stats
        if stats is None:
            return
        logger.info("Analysis token usage", extra={
            "attempts": len(self.attempts), **stats.to_dict(),
        })
