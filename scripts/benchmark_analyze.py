"""Sentence analysis latency benchmark.

Runs real sentences through the full analysis pipeline (retry tiers
included) and reports latency, token usage and which tier answered.
Not collected by pytest (manual run only).

Usage:
    PYTHONPATH=src python scripts/benchmark_analyze.py [--count 10] [--file sentences.txt] [--model gemini/gemini-2.5-flash]
"""

import asyncio
import argparse
import random
import time
from collections import Counter
from dotenv import load_dotenv

load_dotenv()

from adapter.external.litellm import LiteLLMAdapter
from domain.model.errors import AnalysisError
from services.analysis_service import AnalysisService, RetryPolicy
from utils.config import get_settings

SAMPLE_SENTENCES = [
    "She gave up smoking.",
    "He looked it up in the dictionary.",
    "The unbelievably talented musicians performed beautifully.",
    "You had better finish your homework before dinner.",
    "Despite the rain, the children kept on playing outside.",
    "It's raining cats and dogs.",
    "Unfortunately, the reorganization was postponed indefinitely.",
    "They ran out of milk, so I went to the store.",
    "I'm going to call her back tomorrow.",
    "Misunderstandings between neighbours are surprisingly common.",
]


def load_sentences(path: str | None, count: int) -> list[str]:
    """Read one sentence per line, or fall back to the built-in samples."""
    if path:
        with open(path, encoding="utf-8") as f:
            sentences = [line.strip() for line in f if line.strip()]
    else:
        sentences = list(SAMPLE_SENTENCES)

    if len(sentences) <= count:
        return sentences
    return random.sample(sentences, count)


async def run_benchmark(sentences: list[str], policy: RetryPolicy, api_key: str):
    """Analyze each sentence once and print per-sentence and summary statistics."""
    llm = LiteLLMAdapter(api_key=api_key)
    results = []

    print(f"\n{'='*70}")
    print("Sentence analysis benchmark")
    print(f"Primary model:  {policy.primary_model}")
    print(f"Fallback model: {policy.fallback_model if policy.has_fallback else '(disabled)'}")
    print(f"Sentences:      {len(sentences)}")
    print(f"{'='*70}\n")

    for i, sentence in enumerate(sentences):
        service = AnalysisService(llm, policy)
        start = time.time()
        try:
            result = await service.analyze(sentence)
            elapsed = time.time() - start
            stats = service.token_stats
            results.append({
                'sentence': sentence,
                'time': elapsed,
                'tier': service.attempts[-1].tier,
                'attempts': len(service.attempts),
                'words': len(result.words),
                'partial': result.partial,
                'completion_tokens': stats.completion_tokens if stats else 0,
                'cost': stats.estimated_cost if stats else 0.0,
                'success': True,
            })
            flag = " partial" if result.partial else ""
            print(f"{i+1:3}. {sentence[:40]:40} | {elapsed:5.2f}s | {service.attempts[-1].tier:8} "
                  f"| words:{len(result.words):3}{flag}")
        except AnalysisError as e:
            elapsed = time.time() - start
            results.append({
                'sentence': sentence,
                'time': elapsed,
                'attempts': len(service.attempts),
                'success': False,
                'error': e.kind.value,
            })
            print(f"{i+1:3}. {sentence[:40]:40} | {elapsed:5.2f}s | ERROR: {e.kind.value}")

    successful = [r for r in results if r['success']]
    print(f"\n{'='*70}")
    print("Summary")
    print(f"{'='*70}")
    print(f"Succeeded: {len(successful)}/{len(results)}")

    if successful:
        times = sorted(r['time'] for r in successful)
        completions = [r['completion_tokens'] for r in successful]
        print("\nLatency:")
        print(f"  mean:   {sum(times)/len(times):.2f}s")
        print(f"  min:    {times[0]:.2f}s")
        print(f"  max:    {times[-1]:.2f}s")
        print(f"  median: {times[len(times)//2]:.2f}s")
        print("\nCompletion tokens:")
        print(f"  mean: {sum(completions)/len(completions):.0f}")
        print(f"  max:  {max(completions)}")
        print(f"\nEstimated cost: ${sum(r['cost'] for r in successful):.4f}")

        print("\nAnswering tier:")
        for tier, count in Counter(r['tier'] for r in successful).most_common():
            print(f"  {tier:8} | {'█' * count} ({count})")
        print(f"Partial results: {len([r for r in successful if r['partial']])}")

    failures = Counter(r['error'] for r in results if not r['success'])
    if failures:
        print("\nFailures:")
        for kind, count in failures.most_common():
            print(f"  {kind}: {count}")

    return results


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(description='Sentence analysis benchmark')
    parser.add_argument('--count', type=int, default=10, help='Number of sentences (default: 10)')
    parser.add_argument('--file', type=str, default=None, help='File with one sentence per line')
    parser.add_argument('--model', type=str, default=settings.primary_model, help='Primary model')
    parser.add_argument('--fallback', type=str, default=settings.fallback_model, help='Fallback model')
    args = parser.parse_args()

    if not settings.api_key:
        print("GEMINI_API_KEY is not set.")
        return

    sentences = load_sentences(args.file, args.count)
    policy = RetryPolicy(primary_model=args.model, fallback_model=args.fallback)
    asyncio.run(run_benchmark(sentences, policy, settings.api_key))


if __name__ == "__main__":
    main()
