from __future__ import annotations

import math
import re
from functools import lru_cache
from typing import Iterable

from cv_ats.core.scoring_config import StatusThresholds
from cv_ats.schemas.analysis import CategoryResult, Status


def score_to_status(score: int, thresholds: StatusThresholds) -> Status:
    if score >= thresholds.excellent:
        return "excellent"
    if score >= thresholds.good:
        return "good"
    if score >= thresholds.needs_improvement:
        return "needs-improvement"
    return "poor"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def build_result(
    category: str,
    score: float,
    thresholds: StatusThresholds,
    issues: list[str],
    recommendations: list[str],
) -> CategoryResult:
    final = clamp_score(score)
    return CategoryResult(
        category=category,
        score=final,
        status=score_to_status(final, thresholds),
        issues=issues,
        recommendations=recommendations,
    )


def has_job_context(job_title: str, job_description: str) -> bool:
    return bool((job_title or "").strip() or (job_description or "").strip())


@lru_cache(maxsize=512)
def _term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(term.lower())}(?!\w)")


def contains_term(text: str, term: str) -> bool:
    """Whole-word (or whole-phrase) containment, case-insensitive."""
    return bool(_term_pattern(term).search((text or "").lower()))


def matched_terms(text: str, terms: Iterable[str]) -> list[str]:
    lowered = (text or "").lower()
    return [term for term in terms if _term_pattern(term).search(lowered)]
