from __future__ import annotations

from cv_ats.analyzers.common import contains_term
from cv_ats.core.scoring_config import ScoringConfig, get_scoring_config

DEFAULT_INDUSTRY = "general"


def industry_hits(text: str, config: ScoringConfig | None = None) -> dict[str, int]:
    keywords = (config or get_scoring_config()).benchmarks.industry_keywords
    return {
        industry: sum(1 for term in terms if contains_term(text, term))
        for industry, terms in keywords.items()
    }


def detect_industry(text: str, config: ScoringConfig | None = None) -> str:
    """Industry with the most keyword hits; ties go to the one declared first."""
    best, best_hits = DEFAULT_INDUSTRY, 0
    for industry, hits in industry_hits(text, config).items():
        if hits > best_hits:
            best, best_hits = industry, hits
    return best
