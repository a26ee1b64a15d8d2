from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from cv_ats.core.config import settings
from cv_ats.schemas.analysis import WEIGHT_KEYS, WEIGHT_TOLERANCE, IndustryBenchmark

logger = logging.getLogger(__name__)

_SCORING_CONFIG_CACHE: "ScoringConfig | None" = None
_DEFAULT_SCORING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "scoring.yaml"


class BenchmarkConfigError(RuntimeError):
    """Raised when the scoring configuration is missing or structurally invalid."""


class StatusThresholds(BaseModel):
    excellent: int = Field(ge=0, le=100)
    good: int = Field(ge=0, le=100)
    needs_improvement: int = Field(ge=0, le=100)

    @model_validator(mode="after")
    def _check_order(self) -> "StatusThresholds":
        if not self.excellent > self.good > self.needs_improvement:
            raise ValueError("status thresholds must be strictly decreasing")
        return self


class StatusConfig(BaseModel):
    default: StatusThresholds
    keywords: StatusThresholds


class ImpactConfig(BaseModel):
    base_score: int = 100
    min_quantified_matches: int = Field(ge=1)
    few_metrics_penalty: int = Field(ge=0)
    min_relevance: float = Field(ge=0.0, le=1.0)
    low_relevance_penalty: int = Field(ge=0)
    missing_project_penalty: int = Field(ge=0)
    min_token_length: int = Field(ge=1)
    project_terms: list[str]


class LengthConfig(BaseModel):
    min_words: int = Field(ge=0)
    max_words: int = Field(ge=0)
    short_min_penalty: int = Field(ge=0)
    short_max_penalty: int = Field(ge=0)
    long_base_penalty: int = Field(ge=0)
    long_penalty_per_100_words: int = Field(ge=0)
    long_max_penalty: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_band(self) -> "LengthConfig":
        if self.min_words >= self.max_words:
            raise ValueError("length band requires min_words < max_words")
        if self.short_min_penalty > self.short_max_penalty:
            raise ValueError("short_min_penalty must not exceed short_max_penalty")
        return self


class CompletenessConfig(BaseModel):
    base_score: int = 100
    certificate_penalty: int = Field(ge=0)
    certificate_margin: int = Field(ge=0)
    certificate_max_resume_indicators: int = Field(ge=0)
    certificate_missing_vocabulary_penalty: int = Field(ge=0)
    missing_experience_penalty: int = Field(ge=0)
    missing_contact_penalty: int = Field(ge=0)
    partial_contact_penalty: int = Field(ge=0)
    missing_education_penalty: int = Field(ge=0)
    missing_skills_penalty: int = Field(ge=0)
    missing_summary_penalty: int = Field(ge=0)
    weak_summary_penalty: int = Field(ge=0)
    summary_scan_lines: int = Field(ge=1)
    summary_quality_threshold: int
    certificate_terms: list[str]
    resume_terms: list[str]
    organization_terms: list[str]
    achievement_terms: list[str]
    summary_terms: list[str]
    generic_phrases: list[str]


class SignalWeights(BaseModel):
    exact: float = Field(ge=0.0, le=1.0)
    technical: float = Field(ge=0.0, le=1.0)
    action: float = Field(ge=0.0, le=1.0)
    semantic: float = Field(ge=0.0, le=1.0)
    tfidf: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "SignalWeights":
        total = self.exact + self.technical + self.action + self.semantic + self.tfidf
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_TOLERANCE):
            raise ValueError(f"keyword signal weights must sum to 1.0, got {total:.6f}")
        return self


class KeywordConfig(BaseModel):
    min_token_length: int = Field(ge=1)
    tfidf_top_n: int = Field(ge=1)
    missing_title_penalty: int = Field(ge=0)
    max_listed_missing: int = Field(ge=1)
    weights: SignalWeights
    technical_terms: list[str]
    action_verbs: list[str]


class ReadabilityConfig(BaseModel):
    missing_email_penalty: int = Field(ge=0)
    missing_phone_penalty: int = Field(ge=0)
    min_sections: int = Field(ge=0)
    few_sections_penalty: int = Field(ge=0)
    missing_experience_penalty: int = Field(ge=0)
    missing_education_penalty: int = Field(ge=0)
    missing_bullets_penalty: int = Field(ge=0)
    capitalization_penalty: int = Field(ge=0)
    non_ascii_penalty: int = Field(ge=0)
    long_line_chars: int = Field(ge=1)
    long_line_ratio: float = Field(ge=0.0, le=1.0)
    long_lines_penalty: int = Field(ge=0)
    spacing_penalty: int = Field(ge=0)
    scoring_min_words: int = Field(ge=0)
    scoring_short_penalty: int = Field(ge=0)
    scoring_max_words: int = Field(ge=1)
    scoring_long_penalty: int = Field(ge=0)
    missing_date_ranges_penalty: int = Field(ge=0)
    missing_skills_penalty: int = Field(ge=0)
    missing_summary_penalty: int = Field(ge=0)


class BenchmarkConfig(BaseModel):
    grade_thresholds: list[tuple[int, str]]
    improvement_cap: int = Field(ge=0, le=100)
    high_priority_bonus: int = Field(ge=0)
    career_level_adjustments: dict[str, dict[str, float]] = Field(default_factory=dict)
    industries: dict[str, IndustryBenchmark]
    industry_keywords: dict[str, list[str]]

    @model_validator(mode="after")
    def _check_profiles(self) -> "BenchmarkConfig":
        if "general" not in self.industries:
            raise ValueError("benchmarks.industries must define a 'general' profile")
        unknown = [key for key in self.industry_keywords if key not in self.industries]
        if unknown:
            raise ValueError(f"industry_keywords reference unknown industries: {', '.join(unknown)}")
        scores = [score for score, _ in self.grade_thresholds]
        if scores != sorted(scores, reverse=True):
            raise ValueError("grade_thresholds must be sorted by descending score")
        for level, deltas in self.career_level_adjustments.items():
            bad_keys = [key for key in deltas if key not in WEIGHT_KEYS]
            if bad_keys:
                raise ValueError(f"career level '{level}' adjusts unknown weights: {', '.join(bad_keys)}")
            if not math.isclose(sum(deltas.values()), 0.0, abs_tol=WEIGHT_TOLERANCE):
                raise ValueError(f"career level '{level}' adjustments must sum to 0")
        return self


class ScoringConfig(BaseModel):
    status_thresholds: StatusConfig
    impact: ImpactConfig
    length: LengthConfig
    completeness: CompletenessConfig
    keywords: KeywordConfig
    readability: ReadabilityConfig
    benchmarks: BenchmarkConfig


def _resolve_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    if settings.scoring_config_path:
        return Path(settings.scoring_config_path)
    return _DEFAULT_SCORING_CONFIG_PATH


def load_scoring_config(path: str | Path | None = None) -> ScoringConfig:
    """Read and validate a scoring config file without touching the cache."""
    config_path = _resolve_path(path)
    if not config_path.exists():
        raise BenchmarkConfigError(
            f"Scoring config not found at '{config_path}'. "
            "Expected file: config/scoring.yaml"
        )

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BenchmarkConfigError(f"Failed to read scoring config '{config_path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise BenchmarkConfigError(f"Invalid YAML in scoring config '{config_path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise BenchmarkConfigError(
            f"Invalid scoring config '{config_path}': expected a top-level mapping."
        )

    try:
        return ScoringConfig.model_validate(parsed)
    except ValidationError as exc:
        raise BenchmarkConfigError(f"Invalid scoring config '{config_path}': {exc}") from exc


def get_scoring_config() -> ScoringConfig:
    """Load the scoring config once and cache it for the process lifetime."""
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is not None:
        return _SCORING_CONFIG_CACHE

    _SCORING_CONFIG_CACHE = load_scoring_config()
    logger.info(
        "scoring_config_loaded industries=%s",
        ",".join(_SCORING_CONFIG_CACHE.benchmarks.industries),
    )
    return _SCORING_CONFIG_CACHE


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'keywords.weights.exact'."""
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if isinstance(current, BaseModel):
            if key not in type(current).model_fields:
                return default
            current = getattr(current, key)
        elif isinstance(current, dict):
            if key not in current:
                return default
            current = current[key]
        else:
            return default
    return current
