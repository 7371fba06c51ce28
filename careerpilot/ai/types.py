from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class TokenUsage:
    prompt: int
    completion: int
    total: int


@dataclass(frozen=True)
class CompletionResult:
    content: str
    tokens_used: TokenUsage
    estimated_cost: float
    model: str


class ChatCompletionsAPI(Protocol):
    def create(self, **kwargs: Any) -> Any: ...


class ChatAPI(Protocol):
    @property
    def completions(self) -> ChatCompletionsAPI: ...


class CompletionSDK(Protocol):
    """The slice of the OpenAI SDK client used by the completion client."""

    @property
    def chat(self) -> ChatAPI: ...
