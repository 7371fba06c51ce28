from __future__ import annotations

import logging
import math

import tiktoken

logger = logging.getLogger(__name__)


def tokenizer_model(model: str) -> str:
    name = (model or "").lower()
    if "gpt-4" in name:
        return "gpt-4"
    if "gpt-3.5-turbo" in name:
        return "gpt-3.5-turbo"
    return "gpt-4"


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text or "") / 4)


def count_tokens(text: str, model: str = "gpt-4") -> int:
    try:
        encoding = tiktoken.encoding_for_model(tokenizer_model(model))
        return len(encoding.encode(text or ""))
    except Exception as exc:  # noqa: BLE001 - character estimate is the documented fallback
        logger.warning("token_count_failed model=%s: %s", model, exc)
        return estimate_tokens(text)
