from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, Field, model_validator

SectionKind = Literal["contact", "summary", "experience", "education", "skills"]
Status = Literal["excellent", "good", "needs-improvement", "poor"]
Grade = Literal["A+", "A", "B+", "B", "C+", "C", "D", "F"]
MarketPosition = Literal["Top 10%", "Top 25%", "Above Average", "Average", "Below Average"]
InsightSource = Literal["rules", "ai"]

WEIGHT_KEYS: tuple[str, ...] = ("parsing", "keywords", "content", "format")
WEIGHT_TOLERANCE = 1e-6


class DocumentMetadata(BaseModel):
    word_count: int = Field(ge=0)
    has_email: bool = False
    has_phone: bool = False
    has_linkedin: bool = False
    section_count: int = Field(default=0, ge=0)


class SegmentedDocument(BaseModel):
    raw_text: str
    sections: dict[SectionKind, str] = Field(default_factory=dict)
    metadata: DocumentMetadata

    @model_validator(mode="after")
    def _check_section_count(self) -> "SegmentedDocument":
        non_empty = sum(1 for value in self.sections.values() if value)
        if self.metadata.section_count != non_empty:
            raise ValueError(
                f"section_count={self.metadata.section_count} does not match {non_empty} detected sections"
            )
        return self


class CategoryResult(BaseModel):
    category: str
    score: int = Field(ge=0, le=100)
    status: Status
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ScoringWeights(BaseModel):
    parsing: float = Field(ge=0.0, le=1.0)
    keywords: float = Field(ge=0.0, le=1.0)
    content: float = Field(ge=0.0, le=1.0)
    format: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoringWeights":
        total = self.parsing + self.keywords + self.content + self.format
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_TOLERANCE):
            raise ValueError(f"weights must sum to 1.0, got {total:.6f}")
        return self


class IndustryBenchmark(BaseModel):
    name: str
    average_score: float = Field(gt=0.0, lt=100.0)
    top_percentile_score: float = Field(gt=0.0, lt=100.0)
    weights: ScoringWeights
    key_focus_areas: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_anchors(self) -> "IndustryBenchmark":
        if self.top_percentile_score <= self.average_score:
            raise ValueError("top_percentile_score must be greater than average_score")
        return self


class ScoreBreakdown(BaseModel):
    category: str
    raw_score: int = Field(ge=0, le=100)
    weighted_score: float
    weight: float
    percentile: float
    grade: Grade


class CompetitiveAnalysis(BaseModel):
    vs_average_candidate: int
    vs_top_percentile: int
    market_position: MarketPosition


class CompositeScore(BaseModel):
    overall_score: int
    weighted_score: int
    industry_percentile: int
    overall_grade: Grade
    breakdown: list[ScoreBreakdown]
    competitive_analysis: CompetitiveAnalysis
    improvement_potential: int = Field(ge=0, le=30)


class Report(BaseModel):
    metadata: DocumentMetadata
    results: list[CategoryResult]
    overall_score: int = Field(ge=0, le=100)
    industry: str | None = None
    composite: CompositeScore | None = None
    ranking_insights: list[str] = Field(default_factory=list)
    ats_checks: list[CategoryResult] = Field(default_factory=list)
    insight_sources: dict[str, InsightSource] = Field(default_factory=dict)
