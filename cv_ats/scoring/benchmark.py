from __future__ import annotations

import logging
from typing import Literal, Mapping

from pydantic import BaseModel, Field

from cv_ats.analyzers.common import round_half_up
from cv_ats.core.scoring_config import BenchmarkConfigError, ScoringConfig, get_scoring_config
from cv_ats.schemas.analysis import (
    WEIGHT_KEYS,
    CompetitiveAnalysis,
    CompositeScore,
    Grade,
    IndustryBenchmark,
    MarketPosition,
    ScoreBreakdown,
    ScoringWeights,
)

logger = logging.getLogger(__name__)

# Composite slot -> label of the category analyzer that feeds it.
BREAKDOWN_LABELS: dict[str, str] = {
    "parsing": "CV Completeness",
    "keywords": "Job Keyword Match",
    "content": "Quantitative Impact",
    "format": "CV Length",
}


class AIScoringInsights(BaseModel):
    career_level: Literal["entry-level", "mid-level", "senior-level"] | None = None
    improvement_priority: Literal["low", "medium", "high"] | None = None
    industry_detected: str | None = None
    skills_gap: list[str] = Field(default_factory=list)


def get_benchmark(industry: str, config: ScoringConfig | None = None) -> IndustryBenchmark:
    industries = (config or get_scoring_config()).benchmarks.industries
    try:
        return industries[industry]
    except KeyError:
        raise BenchmarkConfigError(
            f"Unknown industry '{industry}'. Known industries: {', '.join(industries)}"
        ) from None


def resolve_industry(
    industry: str,
    ai_insights: AIScoringInsights | None,
    config: ScoringConfig | None = None,
) -> str:
    """An AI-detected industry wins when it names a configured benchmark."""
    industries = (config or get_scoring_config()).benchmarks.industries
    if ai_insights and ai_insights.industry_detected in industries:
        return ai_insights.industry_detected
    return industry


def calculate_percentile(score: float, benchmark: IndustryBenchmark) -> float:
    """Piecewise-linear percentile: 0-50 below average, 50-90 up to the top anchor, 90-100 beyond."""
    average = benchmark.average_score
    top = benchmark.top_percentile_score
    if score >= top:
        return 90.0 + (score - top) / (100.0 - top) * 10.0
    if score >= average:
        return 50.0 + (score - average) / (top - average) * 40.0
    return max(0.0, score / average * 50.0)


def calculate_grade(score: float, config: ScoringConfig | None = None) -> Grade:
    for threshold, grade in (config or get_scoring_config()).benchmarks.grade_thresholds:
        if score >= threshold:
            return grade  # type: ignore[return-value]
    return "F"


def calculate_market_position(percentile: float) -> MarketPosition:
    if percentile >= 90:
        return "Top 10%"
    if percentile >= 75:
        return "Top 25%"
    if percentile >= 60:
        return "Above Average"
    if percentile >= 40:
        return "Average"
    return "Below Average"


def adjust_weights(
    weights: ScoringWeights,
    career_level: str | None,
    config: ScoringConfig | None = None,
) -> ScoringWeights:
    deltas = (config or get_scoring_config()).benchmarks.career_level_adjustments.get(career_level or "", {})
    if not deltas:
        return weights
    shifted = {key: max(0.0, getattr(weights, key) + deltas.get(key, 0.0)) for key in WEIGHT_KEYS}
    # clamping at zero can break the unit sum
    total = sum(shifted.values())
    return ScoringWeights(**{key: value / total for key, value in shifted.items()})


def aggregate(
    category_scores: Mapping[str, int],
    industry: str,
    *,
    ai_insights: AIScoringInsights | None = None,
    config: ScoringConfig | None = None,
) -> CompositeScore:
    """Combine the four category scores into an industry-benchmarked composite.

    ``category_scores`` is keyed by composite slot (parsing, keywords, content,
    format). AI insights may override the industry, shift weights by career
    level, and raise the improvement-potential cap for urgent cases.
    """
    cfg = config or get_scoring_config()
    rules = cfg.benchmarks

    missing = [key for key in WEIGHT_KEYS if key not in category_scores]
    if missing:
        raise ValueError(f"category_scores is missing: {', '.join(missing)}")

    industry = resolve_industry(industry, ai_insights, cfg)
    benchmark = get_benchmark(industry, cfg)
    weights = adjust_weights(benchmark.weights, ai_insights.career_level if ai_insights else None, cfg)

    breakdown = []
    for key in WEIGHT_KEYS:
        raw = int(category_scores[key])
        weight = getattr(weights, key)
        breakdown.append(
            ScoreBreakdown(
                category=BREAKDOWN_LABELS[key],
                raw_score=raw,
                weight=weight,
                weighted_score=raw * weight,
                percentile=calculate_percentile(raw, benchmark),
                grade=calculate_grade(raw, cfg),
            )
        )

    overall_score = round_half_up(sum(int(category_scores[key]) for key in WEIGHT_KEYS) / len(WEIGHT_KEYS))
    weighted_score = round_half_up(sum(item.weighted_score for item in breakdown))
    industry_percentile = calculate_percentile(weighted_score, benchmark)

    improvement_potential = min(100 - weighted_score, rules.improvement_cap)
    if ai_insights and ai_insights.improvement_priority == "high":
        improvement_potential += rules.high_priority_bonus
    improvement_potential = max(0, improvement_potential)

    composite = CompositeScore(
        overall_score=overall_score,
        weighted_score=weighted_score,
        industry_percentile=round_half_up(industry_percentile),
        overall_grade=calculate_grade(weighted_score, cfg),
        breakdown=breakdown,
        competitive_analysis=CompetitiveAnalysis(
            vs_average_candidate=round_half_up(weighted_score - benchmark.average_score),
            vs_top_percentile=round_half_up(weighted_score - benchmark.top_percentile_score),
            market_position=calculate_market_position(industry_percentile),
        ),
        improvement_potential=improvement_potential,
    )
    logger.debug(
        "composite_computed industry=%s weighted=%s percentile=%s",
        industry,
        weighted_score,
        composite.industry_percentile,
    )
    return composite


def generate_ranking_insights(
    composite: CompositeScore,
    industry: str,
    config: ScoringConfig | None = None,
) -> list[str]:
    benchmark = get_benchmark(industry, config)
    analysis = composite.competitive_analysis
    insights: list[str] = []

    if analysis.market_position == "Top 10%":
        insights.append(f"Excellent! Your CV ranks in the top 10% for {benchmark.name} professionals.")
    elif analysis.market_position == "Top 25%":
        insights.append("Great performance! Your CV is in the top 25% for your industry.")
    elif analysis.market_position == "Above Average":
        insights.append("Your CV performs above average compared to industry peers.")
    else:
        insights.append("There's significant room for improvement to reach industry standards.")

    if analysis.vs_average_candidate > 0:
        insights.append(f"You score {analysis.vs_average_candidate} points above the average candidate.")
    else:
        insights.append(f"You're {abs(analysis.vs_average_candidate)} points below the average candidate.")

    weakest = min(composite.breakdown, key=lambda item: item.raw_score)
    insights.append(f'Focus on improving "{weakest.category}" for maximum impact.')

    if composite.improvement_potential > 15:
        insights.append(
            f"High improvement potential: up to {composite.improvement_potential} additional points possible."
        )
    return insights
