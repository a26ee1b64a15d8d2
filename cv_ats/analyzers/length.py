from __future__ import annotations

from cv_ats.core.scoring_config import LengthConfig, ScoringConfig, get_scoring_config
from cv_ats.schemas.analysis import CategoryResult, SegmentedDocument

from .common import build_result, round_half_up

CATEGORY = "CV Length"


def length_penalty(word_count: int, rules: LengthConfig) -> int:
    """Zero inside the band; shortfall is punished harder than verbosity."""
    if word_count < rules.min_words:
        spread = rules.short_max_penalty - rules.short_min_penalty
        return round_half_up(rules.short_min_penalty + (rules.min_words - word_count) * spread / rules.min_words)
    if word_count > rules.max_words:
        excess_hundreds = (word_count - rules.max_words) // 100
        return min(
            rules.long_max_penalty,
            rules.long_base_penalty + excess_hundreds * rules.long_penalty_per_100_words,
        )
    return 0


def analyze_length(doc: SegmentedDocument, config: ScoringConfig | None = None) -> CategoryResult:
    cfg = config or get_scoring_config()
    rules = cfg.length
    word_count = doc.metadata.word_count
    issues: list[str] = []
    recommendations: list[str] = []

    if word_count < rules.min_words:
        issues.append(
            f"CV is too short: {word_count} words, the recommended range is "
            f"{rules.min_words}-{rules.max_words} words"
        )
        recommendations.append(
            "Expand your experience and project descriptions with responsibilities, tools used and results"
        )
    elif word_count > rules.max_words:
        issues.append(
            f"CV is too long: {word_count} words, the recommended range is "
            f"{rules.min_words}-{rules.max_words} words"
        )
        recommendations.append(
            "Condense older or less relevant roles and keep the CV to one or two pages"
        )

    score = 100 - length_penalty(word_count, rules)
    return build_result(CATEGORY, score, cfg.status_thresholds.default, issues, recommendations)
