from .analysis import (
    CategoryResult,
    CompetitiveAnalysis,
    CompositeScore,
    DocumentMetadata,
    IndustryBenchmark,
    Report,
    ScoreBreakdown,
    ScoringWeights,
    SectionKind,
    SegmentedDocument,
)
from .api import AnalyzeRequest

__all__ = [
    "AnalyzeRequest",
    "CategoryResult",
    "CompetitiveAnalysis",
    "CompositeScore",
    "DocumentMetadata",
    "IndustryBenchmark",
    "Report",
    "ScoreBreakdown",
    "ScoringWeights",
    "SectionKind",
    "SegmentedDocument",
]
