import logging

from cv_ats.ai.config import AIConfig, load_ai_config
from cv_ats.ai.providers.openai_provider import OpenAIInsightProvider

logger = logging.getLogger(__name__)


def get_insight_provider(cfg: AIConfig | None = None) -> OpenAIInsightProvider | None:
    """Configured AI insight provider, or None when AI insights are switched off."""
    cfg = cfg or load_ai_config()
    if not cfg.enabled:
        logger.info("ai_insights_disabled provider=%s", cfg.provider)
        return None

    if cfg.provider == "openai":
        return OpenAIInsightProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
