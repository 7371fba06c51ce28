from .completion_client import (
    CompletionAuthError,
    CompletionBadRequestError,
    CompletionClient,
    CompletionError,
    CompletionNotConfiguredError,
    CompletionRetriesExhausted,
    EmptyCompletionError,
)
from .types import CompletionResult, TokenUsage

__all__ = [
    "CompletionAuthError",
    "CompletionBadRequestError",
    "CompletionClient",
    "CompletionError",
    "CompletionNotConfiguredError",
    "CompletionResult",
    "CompletionRetriesExhausted",
    "EmptyCompletionError",
    "TokenUsage",
]
