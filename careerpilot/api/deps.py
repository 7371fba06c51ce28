from __future__ import annotations

from fastapi import HTTPException, Request, status

from careerpilot.ai.completion_client import (
    CompletionClient,
    CompletionError,
    CompletionNotConfiguredError,
)
from careerpilot.services.usage_tracker import UsageLimitExceeded, UsageTracker
from careerpilot.storage.document_store import DocumentNotFoundError, DocumentStore


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_usage_tracker(request: Request) -> UsageTracker:
    return request.app.state.usage_tracker


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


def raise_http_error(exc: Exception) -> None:
    if isinstance(exc, DocumentNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, UsageLimitExceeded):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "message": str(exc),
                "feature": exc.feature,
                "limit": exc.limit,
                "current_usage": exc.current_usage,
                "resets_at": exc.resets_at.isoformat(),
            },
        ) from exc
    if isinstance(exc, CompletionNotConfiguredError):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    if isinstance(exc, CompletionError):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": str(exc), "code": exc.code},
        ) from exc
    raise exc
