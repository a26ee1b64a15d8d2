from __future__ import annotations

import re

from cv_ats.core.scoring_config import ScoringConfig, get_scoring_config
from cv_ats.schemas.analysis import CategoryResult, SegmentedDocument
from cv_ats.semantic.similarity import token_set

from .common import build_result, has_job_context, matched_terms

CATEGORY = "Quantitative Impact"

QUANTIFIED_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b\d+(?:[.,]\d+)?\s?%"),
    re.compile(r"\b\d[\d.,]*\s?\+"),
    re.compile(
        r"(?:[$€£]|\brp\.?|\bidr|\busd)\s?\d[\d.,]*(?:\s?(?:k|m|b|jt|juta|miliar|million|billion)\b)?",
        re.IGNORECASE,
    ),
    re.compile(r"\b\d+\s?(?:years?|yrs?|months?|weeks?|tahun|bulan|minggu)\b", re.IGNORECASE),
)


def find_quantified_achievements(text: str) -> list[str]:
    """Distinct metric expressions (percentages, counts, money, durations) in order of appearance."""
    found: dict[str, None] = {}
    for pattern in QUANTIFIED_PATTERNS:
        for match in pattern.finditer(text or ""):
            found.setdefault(match.group(0).strip().lower(), None)
    return list(found)


def keyword_relevance(doc_text: str, job_text: str, min_length: int) -> tuple[int, int]:
    """(matched, total) job keyword tokens that also occur in the document."""
    job_tokens = token_set(job_text, min_length=min_length)
    if not job_tokens:
        return 0, 0
    doc_tokens = token_set(doc_text, min_length=min_length)
    return len(job_tokens & doc_tokens), len(job_tokens)


def analyze_impact(
    doc: SegmentedDocument,
    job_title: str = "",
    job_description: str = "",
    config: ScoringConfig | None = None,
) -> CategoryResult:
    cfg = config or get_scoring_config()
    rules = cfg.impact
    thresholds = cfg.status_thresholds.default

    if not has_job_context(job_title, job_description):
        return build_result(
            CATEGORY,
            0,
            thresholds,
            ["No target job title or job description was provided, so impact relevance cannot be assessed"],
            ["Provide the job title and job description you are applying for to evaluate quantitative impact"],
        )

    issues: list[str] = []
    recommendations: list[str] = []
    score = rules.base_score
    text = doc.raw_text

    metrics = find_quantified_achievements(text)
    if len(metrics) < rules.min_quantified_matches:
        score -= rules.few_metrics_penalty
        issues.append(
            f"Only {len(metrics)} quantified achievement(s) found; at least {rules.min_quantified_matches} expected"
        )
        recommendations.append(
            "Add measurable results such as percentages, team sizes, revenue figures or project durations "
            "(e.g. 'reduced load time by 35%', '10+ projects')"
        )

    job_text = job_description if (job_description or "").strip() else job_title
    matched, total = keyword_relevance(text, job_text, rules.min_token_length)
    if total:
        relevance = matched / total
        if relevance < rules.min_relevance:
            score -= rules.low_relevance_penalty
            issues.append(
                f"Experience relevance to the target job is low: {matched} of {total} job keywords "
                f"appear in the CV ({relevance:.0%})"
            )
            recommendations.append(
                "Describe experience and projects using the terminology of the job description"
            )

    if not matched_terms(text, rules.project_terms):
        score -= rules.missing_project_penalty
        issues.append("No project or implementation work is described")
        recommendations.append(
            "Mention concrete projects you built, implemented or delivered and the outcome of each"
        )

    return build_result(CATEGORY, score, thresholds, issues, recommendations)
