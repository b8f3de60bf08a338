"""Token usage and cost estimate for a run."""

from __future__ import annotations

from pydantic import BaseModel

# Pricing per 1M tokens (USD)
MODEL_PRICING: dict[str, dict[str, float]] = {
    "claude-sonnet-4-20250514": {"input": 3.00, "output": 15.00},
    "claude-sonnet-4-5-20250929": {"input": 3.00, "output": 15.00},
    "claude-haiku-4-5-20251001": {"input": 0.80, "output": 4.00},
}


class UsageSummary(BaseModel):
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost_usd: float = 0.0


def calculate_cost(calls: list[tuple[str, int, int]]) -> float:
    """Total estimated cost in USD for (model_id, input_tokens, output_tokens) calls.

    Models without a price entry count as free.
    """
    total = 0.0
    for model_id, input_tokens, output_tokens in calls:
        pricing = MODEL_PRICING.get(model_id)
        if pricing is None:
            continue
        total += (input_tokens / 1_000_000) * pricing["input"]
        total += (output_tokens / 1_000_000) * pricing["output"]
    return total


def summarize_usage(token_summary: dict) -> UsageSummary:
    """Build a summary from ``LLMClient.get_token_summary()`` output."""
    calls = token_summary.get("calls", [])
    return UsageSummary(
        calls=len(calls),
        input_tokens=token_summary.get("input", 0),
        output_tokens=token_summary.get("output", 0),
        estimated_cost_usd=round(calculate_cost(calls), 4),
    )
