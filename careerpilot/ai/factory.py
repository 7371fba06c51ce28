from careerpilot.ai.completion_client import CompletionClient
from careerpilot.ai.config import AIConfig, load_ai_config


def build_completion_client(config: AIConfig | None = None) -> CompletionClient:
    return CompletionClient.from_config(config or load_ai_config())
