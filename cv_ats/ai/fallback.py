from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, TypeVar

from pydantic import BaseModel, ValidationError

from cv_ats.ai.types import (
    CompletenessInsight,
    CompletenessInsightProvider,
    InsightProviderError,
    InsightRequest,
    KeywordInsight,
    KeywordInsightProvider,
)
from cv_ats.core.config import settings

logger = logging.getLogger(__name__)

InsightT = TypeVar("InsightT", bound=BaseModel)

# one slot per insight kind
MAX_WORKERS = 2


class FallbackInsightProvider:
    """Wraps optional AI providers so that any failure yields ``None`` instead of an error.

    Calls share a small worker pool and each is abandoned after ``timeout_s``.
    An abandoned call keeps its worker until the provider returns, so providers
    must bound their own requests (``OpenAIInsightProvider`` passes its timeout
    to the client). A provider that never returns pins a pool thread and delays
    interpreter exit.
    Responses are re-validated before they are trusted, so a provider that
    hands back a half-built model is treated the same as one that raises.
    """

    def __init__(
        self,
        keyword_provider: KeywordInsightProvider | None = None,
        completeness_provider: CompletenessInsightProvider | None = None,
        timeout_s: float | None = None,
    ):
        self._keyword_provider = keyword_provider
        self._completeness_provider = completeness_provider
        self._timeout_s = timeout_s if timeout_s is not None else settings.ai_timeout_s
        if self._timeout_s <= 0:
            raise ValueError("timeout_s must be greater than 0")

        self._executor = ThreadPoolExecutor(max_workers=MAX_WORKERS, thread_name_prefix="ai-insight")

    def _call(
        self,
        kind: str,
        call: Callable[[InsightRequest], object],
        request: InsightRequest,
        model: type[InsightT],
    ) -> InsightT | None:
        try:
            future = self._executor.submit(call, request)
            raw = future.result(timeout=self._timeout_s)
            if isinstance(raw, BaseModel):
                raw = raw.model_dump()
            return model.model_validate(raw, strict=True)
        except FutureTimeoutError:
            future.cancel()
            logger.warning("ai_insight_failed kind=%s reason=timeout timeout_s=%s", kind, self._timeout_s)
        except ValidationError as exc:
            logger.warning("ai_insight_failed kind=%s reason=invalid_response errors=%s", kind, exc.error_count())
        except InsightProviderError as exc:
            logger.warning("ai_insight_failed kind=%s reason=%s", kind, exc.code)
        except Exception as exc:
            logger.warning("ai_insight_failed kind=%s reason=%s", kind, type(exc).__name__)
        return None

    def keyword_insight(self, request: InsightRequest) -> KeywordInsight | None:
        if self._keyword_provider is None:
            return None
        return self._call("keywords", self._keyword_provider.keyword_insight, request, KeywordInsight)

    def completeness_insight(self, request: InsightRequest) -> CompletenessInsight | None:
        if self._completeness_provider is None:
            return None
        return self._call(
            "completeness",
            self._completeness_provider.completeness_insight,
            request,
            CompletenessInsight,
        )
