from dataclasses import dataclass

from cv_ats.core.config import Settings, settings


@dataclass(frozen=True)
class AIConfig:
    enabled: bool
    provider: str
    model: str
    timeout_s: float
    api_key: str
    base_url: str | None


def looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def load_ai_config(source: Settings | None = None) -> AIConfig:
    current = source or settings
    api_key = (current.openai_api_key or "").strip()
    enabled = current.ai_insights_enabled and bool(api_key) and not looks_like_placeholder(api_key)
    return AIConfig(
        enabled=enabled,
        provider=current.ai_provider,
        model=current.ai_model,
        timeout_s=current.ai_timeout_s,
        api_key=api_key,
        base_url=current.openai_base_url,
    )
