from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel

from cv_ats.core.scoring_config import ScoringConfig, get_scoring_config
from cv_ats.parsing.segmenter import match_header, split_lines
from cv_ats.schemas.analysis import CategoryResult, SegmentedDocument

from .common import build_result, matched_terms

CATEGORY = "CV Completeness"

DocumentKind = Literal["certificate", "resume"]

_SENTENCE_SPLIT = re.compile(r"[.!?]+(?:\s|$)")
_DIGIT = re.compile(r"\d")
_SUMMARY_MAX_LINES = 3


class DocumentClassification(BaseModel):
    kind: DocumentKind
    certificate_indicators: list[str]
    resume_indicators: list[str]


class SummaryAssessment(BaseModel):
    text: str | None = None
    inferred: bool = False
    quality_points: int | None = None


def classify_document(text: str, config: ScoringConfig | None = None) -> DocumentClassification:
    rules = (config or get_scoring_config()).completeness
    certificate_hits = matched_terms(text, rules.certificate_terms)
    resume_hits = matched_terms(text, rules.resume_terms)
    is_certificate = (
        len(certificate_hits) - len(resume_hits) > rules.certificate_margin
        and len(resume_hits) <= rules.certificate_max_resume_indicators
    )
    return DocumentClassification(
        kind="certificate" if is_certificate else "resume",
        certificate_indicators=certificate_hits,
        resume_indicators=resume_hits,
    )


def summary_quality_points(text: str, config: ScoringConfig | None = None) -> int:
    """Reward specific, quantified, multi-sentence summaries; punish stock phrases."""
    cfg = config or get_scoring_config()
    points = 0
    sentences = [chunk for chunk in _SENTENCE_SPLIT.split(text) if len(chunk.split()) >= 3]
    if len(sentences) >= 2:
        points += 2
    if _DIGIT.search(text):
        points += 2
    if len(text.split()) >= 25:
        points += 1
    if matched_terms(text, cfg.keywords.technical_terms):
        points += 1
    points -= 2 * len(matched_terms(text, cfg.completeness.generic_phrases))
    return points


def infer_summary(doc: SegmentedDocument, config: ScoringConfig | None = None) -> str | None:
    """Find a header-less summary paragraph near the top of the document."""
    rules = (config or get_scoring_config()).completeness
    window = split_lines(doc.raw_text)[: rules.summary_scan_lines]

    for position, line in enumerate(window):
        if match_header(line) is not None:
            continue
        if matched_terms(line, rules.certificate_terms):
            continue
        if not matched_terms(line, rules.summary_terms):
            continue
        collected = [line]
        for follower in window[position + 1 : position + _SUMMARY_MAX_LINES]:
            if match_header(follower) is not None:
                break
            collected.append(follower)
        return " ".join(collected)
    return None


def assess_summary(doc: SegmentedDocument, config: ScoringConfig | None = None) -> SummaryAssessment:
    explicit = doc.sections.get("summary")
    if explicit:
        return SummaryAssessment(text=explicit, inferred=False)
    inferred = infer_summary(doc, config)
    if inferred is None:
        return SummaryAssessment()
    return SummaryAssessment(
        text=inferred,
        inferred=True,
        quality_points=summary_quality_points(inferred, config),
    )


def _analyze_certificate(
    doc: SegmentedDocument,
    classification: DocumentClassification,
    cfg: ScoringConfig,
) -> CategoryResult:
    rules = cfg.completeness
    score = rules.base_score - rules.certificate_penalty
    issues = [
        "The document looks like a certificate rather than a CV "
        f"({len(classification.certificate_indicators)} certificate indicators, "
        f"{len(classification.resume_indicators)} CV indicators)"
    ]
    recommendations = [
        "Upload your CV instead; list certificates in a dedicated 'Certifications' section of the CV"
    ]

    has_organization = bool(matched_terms(doc.raw_text, rules.organization_terms))
    has_achievement = bool(matched_terms(doc.raw_text, rules.achievement_terms))
    if not (has_organization or has_achievement):
        score -= rules.certificate_missing_vocabulary_penalty
        issues.append("The certificate names no issuing organization or achievement")
        recommendations.append("Make sure the issuer and the completed program are clearly stated")

    return build_result(CATEGORY, score, cfg.status_thresholds.default, issues, recommendations)


def analyze_completeness(doc: SegmentedDocument, config: ScoringConfig | None = None) -> CategoryResult:
    cfg = config or get_scoring_config()
    rules = cfg.completeness

    classification = classify_document(doc.raw_text, cfg)
    if classification.kind == "certificate":
        return _analyze_certificate(doc, classification, cfg)

    issues: list[str] = []
    recommendations: list[str] = []
    score = rules.base_score
    meta = doc.metadata

    if "experience" not in doc.sections:
        score -= rules.missing_experience_penalty
        issues.append("Work experience section is missing")
        recommendations.append("Add an 'Experience' section with roles, companies, dates and achievements")

    if not meta.has_email and not meta.has_phone:
        score -= rules.missing_contact_penalty
        issues.append("Contact information is missing: no email address or phone number found")
        recommendations.append("Add an email address and phone number at the top of the CV")
    elif not meta.has_email or not meta.has_phone:
        missing = "email address" if not meta.has_email else "phone number"
        score -= rules.partial_contact_penalty
        issues.append(f"Contact information is incomplete: no {missing} found")
        recommendations.append(f"Add your {missing} to the contact details")

    if "education" not in doc.sections:
        score -= rules.missing_education_penalty
        issues.append("Education section is missing")
        recommendations.append("Add an 'Education' section with degree, institution and graduation year")

    if "skills" not in doc.sections:
        score -= rules.missing_skills_penalty
        issues.append("Skills section is missing")
        recommendations.append("Add a 'Skills' section listing relevant technical and soft skills")

    summary = assess_summary(doc, cfg)
    if summary.text is None:
        score -= rules.missing_summary_penalty
        issues.append("Professional summary is missing")
        recommendations.append(
            "Open the CV with a 2-4 sentence professional summary covering background, key skills and goals"
        )
    elif summary.inferred and (summary.quality_points or 0) < rules.summary_quality_threshold:
        score -= rules.weak_summary_penalty
        issues.append(
            f"Professional summary is generic (quality {summary.quality_points} of "
            f"{rules.summary_quality_threshold} required points)"
        )
        recommendations.append(
            "Make the summary specific: name your field, years of experience and a measurable result, "
            "and avoid phrases like 'hard worker'"
        )

    return build_result(CATEGORY, score, cfg.status_thresholds.default, issues, recommendations)
