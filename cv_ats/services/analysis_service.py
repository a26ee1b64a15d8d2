from __future__ import annotations

import logging
import time

from cv_ats.ai.fallback import FallbackInsightProvider
from cv_ats.ai.types import (
    CompletenessInsight,
    CompletenessInsightProvider,
    InsightRequest,
    KeywordInsight,
    KeywordInsightProvider,
)
from cv_ats.analyzers import completeness as completeness_analyzer
from cv_ats.analyzers import keywords as keyword_analyzer
from cv_ats.analyzers.common import build_result, has_job_context, round_half_up
from cv_ats.analyzers.impact import analyze_impact
from cv_ats.analyzers.length import analyze_length
from cv_ats.analyzers.readability import analyze_format, analyze_parsing, analyze_scoring
from cv_ats.core.scoring_config import ScoringConfig, get_scoring_config
from cv_ats.parsing.segmenter import segment
from cv_ats.schemas.analysis import CategoryResult, InsightSource, Report, SegmentedDocument
from cv_ats.scoring.benchmark import (
    AIScoringInsights,
    aggregate,
    generate_ranking_insights,
    resolve_industry,
)
from cv_ats.scoring.industry import detect_industry

logger = logging.getLogger(__name__)


def _keyword_result(insight: KeywordInsight, cfg: ScoringConfig) -> CategoryResult:
    return build_result(
        keyword_analyzer.CATEGORY,
        insight.score,
        cfg.status_thresholds.keywords,
        list(insight.issues),
        list(insight.recommendations),
    )


def _completeness_result(insight: CompletenessInsight, cfg: ScoringConfig) -> CategoryResult:
    return build_result(
        completeness_analyzer.CATEGORY,
        insight.score,
        cfg.status_thresholds.default,
        list(insight.issues),
        list(insight.recommendations),
    )


class AnalysisService:
    """Runs the full CV analysis pipeline for one document.

    AI providers are optional. When one is missing, fails, times out or returns
    a malformed response, that dimension is scored by the rule-based analyzer
    and the rest of the report is unaffected.
    """

    def __init__(
        self,
        *,
        keyword_provider: KeywordInsightProvider | None = None,
        completeness_provider: CompletenessInsightProvider | None = None,
        config: ScoringConfig | None = None,
        ai_timeout_s: float | None = None,
    ):
        self._config = config
        self._insights = FallbackInsightProvider(
            keyword_provider=keyword_provider,
            completeness_provider=completeness_provider,
            timeout_s=ai_timeout_s,
        )

    @property
    def config(self) -> ScoringConfig:
        return self._config or get_scoring_config()

    def _keywords(
        self,
        doc: SegmentedDocument,
        request: InsightRequest,
        cfg: ScoringConfig,
    ) -> tuple[CategoryResult, InsightSource]:
        # no job context means a fixed zero score; there is nothing to ask the AI about
        if has_job_context(request.job_title, request.job_description):
            insight = self._insights.keyword_insight(request)
            if insight is not None:
                return _keyword_result(insight, cfg), "ai"
        result = keyword_analyzer.analyze_keywords(doc, request.job_description, request.job_title, cfg)
        return result, "rules"

    def _completeness(
        self,
        doc: SegmentedDocument,
        request: InsightRequest,
        cfg: ScoringConfig,
    ) -> tuple[CategoryResult, InsightSource]:
        insight = self._insights.completeness_insight(request)
        if insight is not None:
            logger.debug(
                "completeness_insight spelling=%s grammar=%s missing=%s",
                insight.spelling_score,
                insight.grammar_score,
                len(insight.missing_elements),
            )
            return _completeness_result(insight, cfg), "ai"
        return completeness_analyzer.analyze_completeness(doc, cfg), "rules"

    def analyze(
        self,
        raw_text: str,
        job_title: str = "",
        job_description: str = "",
        *,
        include_composite: bool = True,
        scoring_insights: AIScoringInsights | None = None,
    ) -> Report:
        started = time.perf_counter()
        cfg = self.config
        raw_text = raw_text or ""
        job_title = job_title or ""
        job_description = job_description or ""

        doc = segment(raw_text)
        request = InsightRequest(document_text=raw_text, job_title=job_title, job_description=job_description)

        impact = analyze_impact(doc, job_title, job_description, cfg)
        length = analyze_length(doc, cfg)
        completeness, completeness_source = self._completeness(doc, request, cfg)
        keywords, keywords_source = self._keywords(doc, request, cfg)

        results = [impact, length, completeness, keywords]
        overall_score = round_half_up(sum(result.score for result in results) / len(results))
        industry = resolve_industry(detect_industry(raw_text, cfg), scoring_insights, cfg)

        composite = None
        ranking_insights: list[str] = []
        if include_composite:
            composite = aggregate(
                {
                    "parsing": completeness.score,
                    "keywords": keywords.score,
                    "content": impact.score,
                    "format": length.score,
                },
                industry,
                ai_insights=scoring_insights,
                config=cfg,
            )
            ranking_insights = generate_ranking_insights(composite, industry, cfg)

        report = Report(
            metadata=doc.metadata,
            results=results,
            overall_score=overall_score,
            industry=industry,
            composite=composite,
            ranking_insights=ranking_insights,
            ats_checks=[analyze_parsing(doc, cfg), analyze_format(doc, cfg), analyze_scoring(doc, cfg)],
            insight_sources={"completeness": completeness_source, "keywords": keywords_source},
        )
        logger.info(
            "analysis_completed industry=%s score=%s words=%s sources=%s latency_ms=%s",
            industry,
            overall_score,
            doc.metadata.word_count,
            ",".join(f"{name}:{source}" for name, source in report.insight_sources.items()),
            int((time.perf_counter() - started) * 1000),
        )
        return report


def analyze(
    raw_text: str,
    job_title: str = "",
    job_description: str = "",
    *,
    keyword_provider: KeywordInsightProvider | None = None,
    completeness_provider: CompletenessInsightProvider | None = None,
    include_composite: bool = True,
) -> Report:
    service = AnalysisService(
        keyword_provider=keyword_provider,
        completeness_provider=completeness_provider,
    )
    return service.analyze(raw_text, job_title, job_description, include_composite=include_composite)
