from __future__ import annotations

import logging
import time
from typing import Any, Callable

from openai import APIConnectionError, OpenAI

from careerpilot.ai.backoff import RateLimitBackoff, TransientErrorBackoff
from careerpilot.ai.config import AIConfig
from careerpilot.ai.pricing import estimate_cost
from careerpilot.ai.prompts import build_cover_letter_prompt, build_resume_tailoring_prompt
from careerpilot.ai.tokens import count_tokens
from careerpilot.ai.types import CompletionResult, CompletionSDK, TokenUsage

logger = logging.getLogger(__name__)

RESUME_TAILORING_MAX_TOKENS = 3000
COVER_LETTER_MAX_TOKENS = 1500


class CompletionError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_error"):
        super().__init__(message)
        self.code = code


class CompletionNotConfiguredError(CompletionError):
    def __init__(self, message: str = "OPENAI_API_KEY is not configured in environment variables"):
        super().__init__(message, code="llm_disabled")


class CompletionAuthError(CompletionError):
    def __init__(self, message: str = "OpenAI API authentication failed. Check your API key."):
        super().__init__(message, code="auth_failed")


class CompletionBadRequestError(CompletionError):
    def __init__(self, message: str):
        super().__init__(message, code="bad_request")


class EmptyCompletionError(CompletionError):
    def __init__(
        self,
        message: str = "OpenAI returned empty content. This may be due to content filtering or model issues.",
    ):
        super().__init__(message, code="empty_response")


class CompletionRetriesExhausted(CompletionError):
    def __init__(self, attempts: int, last_message: str):
        super().__init__(
            f"OpenAI API call failed after {attempts} attempts: {last_message or 'Unknown error'}",
            code="retries_exhausted",
        )
        self.attempts = attempts
        self.last_message = last_message


def _status_code(exc: BaseException) -> int | None:
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def _is_connection_error(exc: BaseException) -> bool:
    return isinstance(exc, (APIConnectionError, ConnectionResetError))


def _error_message(exc: BaseException) -> str:
    return str(getattr(exc, "message", None) or exc)


class CompletionClient:
    """Chat-completion wrapper with cost estimation and a two-policy retry loop.

    The SDK client is injected; ``from_config`` builds a real OpenAI client with
    its own retries disabled so only the policies below apply.
    """

    def __init__(
        self,
        sdk: CompletionSDK | None,
        config: AIConfig,
        *,
        sleep: Callable[[float], None] = time.sleep,
        rate_limit_backoff: RateLimitBackoff | None = None,
        transient_backoff: TransientErrorBackoff | None = None,
    ) -> None:
        self._sdk = sdk
        self._config = config
        self._sleep = sleep
        self._rate_limit_backoff = rate_limit_backoff or RateLimitBackoff()
        self._transient_backoff = transient_backoff or TransientErrorBackoff()

    @classmethod
    def from_config(cls, config: AIConfig, **kwargs: Any) -> "CompletionClient":
        sdk: CompletionSDK | None = None
        if config.configured:
            sdk = OpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout_s,
                max_retries=0,
            )
            logger.info("completion_client_initialized model=%s", config.model)
        else:
            logger.warning("completion_client_unconfigured model=%s", config.model)
        return cls(sdk, config, **kwargs)

    @property
    def configured(self) -> bool:
        return self._sdk is not None

    @property
    def default_model(self) -> str:
        return self._config.model

    def count_tokens(self, text: str, model: str | None = None) -> int:
        return count_tokens(text, model or self._config.model)

    def generate_completion(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        model: str | None = None,
        retries: int | None = None,
    ) -> CompletionResult:
        if self._sdk is None:
            raise CompletionNotConfiguredError()

        model = model or self._config.model
        max_tokens = self._config.max_tokens if max_tokens is None else max_tokens
        retries = self._config.retries if retries is None else max(0, retries)
        attempts = retries + 1

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("completion_prompt model=%s prompt_tokens=%s", model, self.count_tokens(prompt, model))

        last_error: BaseException | None = None
        for attempt in range(attempts):
            logger.info(
                "completion_attempt attempt=%s/%s model=%s max_tokens=%s prompt_len=%s",
                attempt + 1,
                attempts,
                model,
                max_tokens,
                len(prompt),
            )
            try:
                result = self._request(prompt, model=model, max_tokens=max_tokens)
            except Exception as exc:  # noqa: BLE001 - classified below
                last_error = exc
                status = _status_code(exc)
                logger.warning(
                    "completion_attempt_failed attempt=%s status=%s type=%s: %s",
                    attempt + 1,
                    status,
                    type(exc).__name__,
                    exc,
                )

                if status in (401, 403):
                    raise CompletionAuthError() from exc
                if status == 400:
                    raise CompletionBadRequestError(f"Invalid request to OpenAI: {_error_message(exc)}") from exc

                if attempt >= retries:
                    break

                if status == 429:
                    delay = self._rate_limit_backoff.delay_seconds(attempt)
                    logger.warning("completion_rate_limited wait_s=%.1f", delay)
                    self._sleep(delay)
                    continue

                if (status is not None and status >= 500) or _is_connection_error(exc):
                    delay = self._transient_backoff.delay_seconds(attempt)
                    logger.info("completion_retry wait_s=%.1f", delay)
                    self._sleep(delay)
                    continue

                continue

            logger.info(
                "completion_succeeded model=%s prompt_tokens=%s completion_tokens=%s cost=%s content_len=%s",
                result.model,
                result.tokens_used.prompt,
                result.tokens_used.completion,
                result.estimated_cost,
                len(result.content),
            )
            return result

        raise CompletionRetriesExhausted(
            attempts=attempts,
            last_message=_error_message(last_error) if last_error else "",
        )

    def _request(self, prompt: str, *, model: str, max_tokens: int) -> CompletionResult:
        assert self._sdk is not None
        response = self._sdk.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            max_completion_tokens=max_tokens,
        )
        choices = getattr(response, "choices", None) or []
        content = (choices[0].message.content or "") if choices else ""
        if not content.strip():
            finish_reason = getattr(choices[0], "finish_reason", None) if choices else None
            logger.error("completion_empty_content finish_reason=%s", finish_reason)
            raise EmptyCompletionError()

        usage = getattr(response, "usage", None)
        if usage is None:
            raise CompletionError("No usage information returned from OpenAI", code="missing_usage")

        tokens = TokenUsage(
            prompt=int(usage.prompt_tokens),
            completion=int(usage.completion_tokens),
            total=int(usage.total_tokens),
        )
        return CompletionResult(
            content=content,
            tokens_used=tokens,
            estimated_cost=estimate_cost(tokens.prompt, tokens.completion, model),
            model=model,
        )

    def generate_resume_tailoring(
        self,
        resume_text: str,
        job_description: str,
        key_requirements: list[str],
    ) -> CompletionResult:
        prompt = build_resume_tailoring_prompt(resume_text, job_description, key_requirements)
        return self.generate_completion(prompt, max_tokens=RESUME_TAILORING_MAX_TOKENS)

    def generate_cover_letter(
        self,
        *,
        company: str,
        position: str,
        description: str,
        candidate_info: str,
        tone: str = "professional",
    ) -> CompletionResult:
        prompt = build_cover_letter_prompt(
            company=company,
            position=position,
            description=description,
            candidate_info=candidate_info,
            tone=tone,
        )
        return self.generate_completion(prompt, max_tokens=COVER_LETTER_MAX_TOKENS)

    def test_connection(self) -> bool:
        try:
            result = self.generate_completion('Say "Hello" if you can hear me.', max_tokens=10)
        except CompletionError as exc:
            logger.error("completion_connection_test_failed: %s", exc)
            return False
        return "hello" in result.content.lower()

    def health_status(self) -> dict[str, Any]:
        return {
            "status": "configured" if self.configured else "not_configured",
            "configured": self.configured,
            "model": self._config.model,
        }
