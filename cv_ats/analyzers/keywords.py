from __future__ import annotations

import re

from pydantic import BaseModel, Field

from cv_ats.core.scoring_config import ScoringConfig, get_scoring_config
from cv_ats.schemas.analysis import CategoryResult, SegmentedDocument
from cv_ats.semantic.similarity import (
    jaccard_similarity,
    normalize_term,
    normalized_terms,
    tokenize,
    top_terms,
)

from .common import build_result, contains_term, has_job_context

CATEGORY = "Job Keyword Match"

_LEADING_PUNCTUATION = re.compile(r"^\W+|\W+$")


class SignalMatch(BaseModel):
    matched: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.matched) + len(self.missing)

    @property
    def rate(self) -> float:
        return len(self.matched) / self.total if self.total else 0.0


class KeywordSignals(BaseModel):
    exact: SignalMatch
    technical: SignalMatch
    action: SignalMatch
    semantic_similarity: float = Field(ge=0.0, le=1.0)
    tfidf: SignalMatch
    title_word: str | None = None
    title_word_missing: bool = False

    def rates(self) -> dict[str, float]:
        # Vocabulary signals with nothing to look for mirror the exact-match rate.
        return {
            "exact": self.exact.rate,
            "technical": self.technical.rate if self.technical.total else self.exact.rate,
            "action": self.action.rate if self.action.total else self.exact.rate,
            "semantic": self.semantic_similarity,
            "tfidf": self.tfidf.rate,
        }

    def contributions(self, config: ScoringConfig | None = None) -> dict[str, float]:
        weights = (config or get_scoring_config()).keywords.weights.model_dump()
        return {name: 100.0 * weights[name] * rate for name, rate in self.rates().items()}


def _split_match(candidates: list[str], present: set[str]) -> SignalMatch:
    return SignalMatch(
        matched=[term for term in candidates if term in present],
        missing=[term for term in candidates if term not in present],
    )


def _technical_match(doc_text: str, job_text: str, cfg: ScoringConfig) -> SignalMatch:
    job_terms = normalized_terms(job_text)
    doc_terms = normalized_terms(doc_text)
    wanted: dict[str, None] = {}
    for term in cfg.keywords.technical_terms:
        normalized = normalize_term(term)
        if normalized and normalized in job_terms:
            wanted.setdefault(normalized, None)
    return _split_match(list(wanted), doc_terms)


def _action_match(doc_tokens: set[str], job_tokens: set[str], cfg: ScoringConfig) -> SignalMatch:
    def stems_in(tokens: set[str]) -> set[str]:
        return {
            stem for stem in cfg.keywords.action_verbs if any(token.startswith(stem) for token in tokens)
        }

    job_stems = stems_in(job_tokens)
    wanted = [stem for stem in cfg.keywords.action_verbs if stem in job_stems]
    return _split_match(wanted, stems_in(doc_tokens))


def _tfidf_match(doc_tokens: list[str], job_tokens: list[str], limit: int) -> SignalMatch:
    corpus = [doc_tokens, job_tokens]
    job_top = top_terms(corpus, 1, limit)
    doc_top = top_terms(corpus, 0, limit)
    matched: list[str] = []
    missing: list[str] = []
    for term in job_top:
        if any(term == other or term in other or other in term for other in doc_top):
            matched.append(term)
        else:
            missing.append(term)
    return SignalMatch(matched=matched, missing=missing)


def _first_title_word(job_title: str) -> str | None:
    words = (job_title or "").split()
    if not words:
        return None
    first = _LEADING_PUNCTUATION.sub("", words[0]).lower()
    return first or None


def compute_keyword_signals(
    doc_text: str,
    job_title: str,
    job_description: str,
    config: ScoringConfig | None = None,
) -> KeywordSignals:
    cfg = config or get_scoring_config()
    min_length = cfg.keywords.min_token_length
    combined_job = f"{job_title or ''} {job_description or ''}".strip()
    similarity_job = job_description if (job_description or "").strip() else job_title

    doc_token_list = tokenize(doc_text, min_length=min_length)
    doc_tokens = set(doc_token_list)
    job_tokens = sorted(set(tokenize(combined_job, min_length=min_length)))

    title_word = _first_title_word(job_title)
    return KeywordSignals(
        exact=_split_match(job_tokens, doc_tokens),
        technical=_technical_match(doc_text, combined_job, cfg),
        action=_action_match(doc_tokens, set(job_tokens), cfg),
        semantic_similarity=jaccard_similarity(doc_tokens, tokenize(similarity_job, min_length=min_length)),
        tfidf=_tfidf_match(
            doc_token_list,
            tokenize(similarity_job, min_length=min_length),
            cfg.keywords.tfidf_top_n,
        ),
        title_word=title_word,
        title_word_missing=bool(title_word) and not contains_term(doc_text, title_word),
    )


def analyze_keywords(
    doc: SegmentedDocument,
    job_description: str = "",
    job_title: str = "",
    config: ScoringConfig | None = None,
) -> CategoryResult:
    cfg = config or get_scoring_config()
    rules = cfg.keywords
    thresholds = cfg.status_thresholds.keywords

    if not has_job_context(job_title, job_description):
        return build_result(
            CATEGORY,
            0,
            thresholds,
            ["No job title or job description was provided, so keyword relevance cannot be measured"],
            ["Provide the target job title and job description to compare your CV keywords against"],
        )

    signals = compute_keyword_signals(doc.raw_text, job_title, job_description, cfg)
    score = sum(signals.contributions(cfg).values())
    issues: list[str] = []
    recommendations: list[str] = []
    limit = rules.max_listed_missing

    exact = signals.exact
    if exact.total:
        issues.append(f"{len(exact.matched)} of {exact.total} job keywords matched in the CV ({exact.rate:.0%})")
        if exact.missing:
            recommendations.append(
                "Work these job keywords into your experience and skills where accurate: "
                + ", ".join(exact.missing[:limit])
            )

    technical = signals.technical
    if technical.missing:
        issues.append(
            f"{len(technical.matched)} of {technical.total} technical skills from the job description found; "
            f"missing: {', '.join(technical.missing[:limit])}"
        )
        recommendations.append("List the required tools and technologies you have used in the Skills section")

    action = signals.action
    if action.missing:
        issues.append(
            f"{len(action.matched)} of {action.total} action verbs from the job description used in the CV"
        )
        recommendations.append(
            "Start experience bullets with the job's action verbs, e.g. " + ", ".join(action.missing[:limit])
        )

    if signals.semantic_similarity < 0.1:
        issues.append(f"Low overall vocabulary overlap with the job description ({signals.semantic_similarity:.2f})")

    tfidf = signals.tfidf
    if tfidf.total and tfidf.rate < 0.5:
        issues.append(
            f"{len(tfidf.matched)} of {tfidf.total} distinctive job description terms appear among "
            "the CV's distinctive terms"
        )

    if signals.title_word_missing:
        score -= rules.missing_title_penalty
        issues.append(f"The job title keyword '{signals.title_word}' does not appear in the CV")
        recommendations.append("Mirror the target job title in your summary or most recent role")

    return build_result(CATEGORY, score, thresholds, issues, recommendations)
