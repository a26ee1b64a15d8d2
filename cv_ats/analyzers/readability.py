from __future__ import annotations

import re

from cv_ats.core.scoring_config import ScoringConfig, get_scoring_config
from cv_ats.parsing.segmenter import split_lines
from cv_ats.schemas.analysis import CategoryResult, SegmentedDocument

from .common import build_result

PARSING_CATEGORY = "CV Parsing"
FORMAT_CATEGORY = "Format & Readability"
SCORING_CATEGORY = "Scoring & Ranking"

_BULLET_GLYPHS = re.compile(r"[•·▪▫◦‣⁃]")
_BULLET_MARKERS = re.compile(r"^\s*[-*+]\s", re.MULTILINE)
_NON_ASCII = re.compile(r"[^\x00-\x7F]")
_WIDE_SPACING = re.compile(r"\s{3,}")
_DATE_RANGE = re.compile(r"\b\d{4}\s*[-–]\s*(?:\d{4}|present|current|now|sekarang)\b", re.IGNORECASE)


def analyze_parsing(doc: SegmentedDocument, config: ScoringConfig | None = None) -> CategoryResult:
    """Can an ATS pull contact details and the standard sections out of the text?"""
    cfg = config or get_scoring_config()
    rules = cfg.readability
    meta = doc.metadata
    issues: list[str] = []
    recommendations: list[str] = []
    score = 100

    if not meta.has_email:
        score -= rules.missing_email_penalty
        issues.append("Email address not detected or poorly formatted")
        recommendations.append("Include a clear email address in standard format")

    if not meta.has_phone:
        score -= rules.missing_phone_penalty
        issues.append("Phone number not detected or poorly formatted")
        recommendations.append("Include a phone number in standard format (e.g. +62 812 3456 7890)")

    if meta.section_count < rules.min_sections:
        score -= rules.few_sections_penalty
        issues.append(f"Only {meta.section_count} standard section(s) detected")
        recommendations.append("Use clear section headers like 'Experience', 'Education', 'Skills'")

    if "experience" not in doc.sections:
        score -= rules.missing_experience_penalty
        issues.append("Experience section not clearly identified")
        recommendations.append("Use the standard header 'Experience' or 'Work Experience'")

    if "education" not in doc.sections:
        score -= rules.missing_education_penalty
        issues.append("Education section not clearly identified")
        recommendations.append("Include a clear 'Education' section with degrees and institutions")

    return build_result(PARSING_CATEGORY, score, cfg.status_thresholds.default, issues, recommendations)


def analyze_format(doc: SegmentedDocument, config: ScoringConfig | None = None) -> CategoryResult:
    cfg = config or get_scoring_config()
    rules = cfg.readability
    text = doc.raw_text
    issues: list[str] = []
    recommendations: list[str] = []
    score = 100

    if not (_BULLET_GLYPHS.search(text) or _BULLET_MARKERS.search(text)):
        score -= rules.missing_bullets_penalty
        issues.append("Limited use of bullet points detected")
        recommendations.append("Use bullet points to organize responsibilities and achievements")

    stripped = text.strip()
    if not stripped[:1].isupper():
        score -= rules.capitalization_penalty
        issues.append("Document does not start with a capitalized line")
        recommendations.append("Ensure proper capitalization throughout the document")

    if _NON_ASCII.search(text):
        score -= rules.non_ascii_penalty
        issues.append("Special characters detected that may cause parsing issues")
        recommendations.append("Use standard ASCII characters to ensure compatibility")

    lines = split_lines(text)
    long_lines = sum(1 for line in lines if len(line) > rules.long_line_chars)
    if lines and long_lines > len(lines) * rules.long_line_ratio:
        score -= rules.long_lines_penalty
        issues.append(f"{long_lines} of {len(lines)} lines are longer than {rules.long_line_chars} characters")
        recommendations.append("Break long sentences into shorter, more readable lines")

    if any(_WIDE_SPACING.search(line) for line in lines):
        score -= rules.spacing_penalty
        issues.append("Inconsistent spacing detected")
        recommendations.append("Use consistent spacing throughout the document")

    return build_result(FORMAT_CATEGORY, score, cfg.status_thresholds.default, issues, recommendations)


def analyze_scoring(doc: SegmentedDocument, config: ScoringConfig | None = None) -> CategoryResult:
    """Signals an ATS ranks on: overall length, dated positions, skills and summary sections."""
    cfg = config or get_scoring_config()
    rules = cfg.readability
    word_count = doc.metadata.word_count
    issues: list[str] = []
    recommendations: list[str] = []
    score = 100

    if word_count < rules.scoring_min_words:
        score -= rules.scoring_short_penalty
        issues.append("CV appears too short for comprehensive evaluation")
        recommendations.append("Expand experience descriptions with more detail")
    elif word_count > rules.scoring_max_words:
        score -= rules.scoring_long_penalty
        issues.append("CV may be too lengthy for ATS processing")
        recommendations.append("Condense content to 1-2 pages for better ATS compatibility")

    if not _DATE_RANGE.search(doc.raw_text):
        score -= rules.missing_date_ranges_penalty
        issues.append("Employment dates not clearly formatted")
        recommendations.append("Include clear date ranges (e.g. 2020-2023) for all positions")

    if "skills" not in doc.sections:
        score -= rules.missing_skills_penalty
        issues.append("Skills section not clearly identified")
        recommendations.append("Add a dedicated 'Skills' section listing relevant technologies")

    if "summary" not in doc.sections:
        score -= rules.missing_summary_penalty
        issues.append("Professional summary not found")
        recommendations.append("Add a short professional summary at the top of the CV")

    return build_result(SCORING_CATEGORY, score, cfg.status_thresholds.default, issues, recommendations)
