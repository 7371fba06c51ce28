from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelRate:
    name: str
    input_per_1k: float
    output_per_1k: float


# Checked in order; the first tier whose marker appears in the model name wins.
_RATE_TIERS: tuple[tuple[tuple[str, ...], ModelRate], ...] = (
    (("gpt-4-turbo", "gpt-4-1106"), ModelRate("turbo", 0.01, 0.03)),
    (("gpt-4",), ModelRate("gpt-4", 0.03, 0.06)),
    (("gpt-3.5-turbo",), ModelRate("economy", 0.0005, 0.0015)),
)
DEFAULT_RATE = ModelRate("default", 0.01, 0.03)


def rate_for_model(model: str) -> ModelRate:
    name = (model or "").lower()
    for markers, rate in _RATE_TIERS:
        if any(marker in name for marker in markers):
            return rate
    return DEFAULT_RATE


def estimate_cost(prompt_tokens: int, completion_tokens: int, model: str) -> float:
    rate = rate_for_model(model)
    input_cost = (prompt_tokens / 1000) * rate.input_per_1k
    output_cost = (completion_tokens / 1000) * rate.output_per_1k
    return round(input_cost + output_cost, 4)
