from .completeness import analyze_completeness, classify_document
from .impact import analyze_impact
from .keywords import analyze_keywords, compute_keyword_signals
from .length import analyze_length
from .readability import analyze_format, analyze_parsing, analyze_scoring

__all__ = [
    "analyze_completeness",
    "analyze_format",
    "analyze_impact",
    "analyze_keywords",
    "analyze_length",
    "analyze_parsing",
    "analyze_scoring",
    "classify_document",
    "compute_keyword_signals",
]
