import os
from dataclasses import dataclass


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class AIConfig:
    api_key: str
    model: str
    max_tokens: int
    retries: int
    timeout_s: float
    base_url: str | None = None

    @property
    def configured(self) -> bool:
        lower = self.api_key.strip().lower()
        if not lower:
            return False
        return not (lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"})


def load_ai_config() -> AIConfig:
    return AIConfig(
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        model=(os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip(),
        max_tokens=_int_env("OPENAI_MAX_TOKENS", 3000),
        retries=_int_env("OPENAI_RETRIES", 3),
        timeout_s=float(os.getenv("OPENAI_TIMEOUT_S", "60")),
        base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
    )
