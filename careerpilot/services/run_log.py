from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from careerpilot.ai.completion_client import CompletionError
from careerpilot.ai.types import CompletionResult
from careerpilot.analytics.db import log_completion_run

logger = logging.getLogger(__name__)


def _log_run(
    *,
    run_id: str,
    feature: str,
    user_id: str,
    model: str,
    status: str,
    started: float,
    result: CompletionResult | None = None,
    error_code: str | None = None,
) -> None:
    try:
        log_completion_run(
            run_id=run_id,
            feature=feature,
            user_id=user_id,
            model=result.model if result else model,
            status=status,
            error_code=error_code,
            prompt_tokens=result.tokens_used.prompt if result else None,
            completion_tokens=result.tokens_used.completion if result else None,
            estimated_cost=result.estimated_cost if result else None,
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
    except Exception:  # pragma: no cover - analytics must not break generation
        logger.debug("completion_run_logging_failed", exc_info=True)


def run_logged_completion(
    call: Callable[[], CompletionResult],
    *,
    feature: str,
    user_id: str,
    model: str,
) -> CompletionResult:
    """Invoke *call* and record its outcome in the completion run log."""
    run_id = uuid.uuid4().hex
    started = time.perf_counter()
    try:
        result = call()
    except CompletionError as exc:
        _log_run(
            run_id=run_id,
            feature=feature,
            user_id=user_id,
            model=model,
            status="error",
            started=started,
            error_code=exc.code,
        )
        raise
    _log_run(
        run_id=run_id,
        feature=feature,
        user_id=user_id,
        model=model,
        status="success",
        started=started,
        result=result,
    )
    return result
