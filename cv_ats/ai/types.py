from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class InsightProviderError(RuntimeError):
    def __init__(self, message: str, *, code: str = "insight_unavailable"):
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class InsightRequest:
    document_text: str
    job_title: str = ""
    job_description: str = ""


class KeywordInsight(BaseModel):
    model_config = ConfigDict(strict=True)

    score: int = Field(ge=0, le=100)
    issues: list[str]
    recommendations: list[str]


class CompletenessInsight(KeywordInsight):
    spelling_score: int = Field(ge=0, le=100)
    grammar_score: int = Field(ge=0, le=100)
    missing_elements: list[str] = Field(default_factory=list)


class KeywordInsightProvider(Protocol):
    def keyword_insight(self, request: InsightRequest) -> KeywordInsight: ...


class CompletenessInsightProvider(Protocol):
    def completeness_insight(self, request: InsightRequest) -> CompletenessInsight: ...
