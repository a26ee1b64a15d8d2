from .benchmark import (
    AIScoringInsights,
    adjust_weights,
    aggregate,
    calculate_grade,
    calculate_market_position,
    calculate_percentile,
    generate_ranking_insights,
    get_benchmark,
    resolve_industry,
)
from .industry import DEFAULT_INDUSTRY, detect_industry

__all__ = [
    "AIScoringInsights",
    "DEFAULT_INDUSTRY",
    "adjust_weights",
    "aggregate",
    "calculate_grade",
    "calculate_market_position",
    "calculate_percentile",
    "detect_industry",
    "generate_ranking_insights",
    "get_benchmark",
    "resolve_industry",
]
