from .similarity import (
    STOP_WORDS,
    jaccard_similarity,
    normalize_term,
    normalized_terms,
    tfidf_rank,
    token_set,
    tokenize,
    top_terms,
)

__all__ = [
    "STOP_WORDS",
    "jaccard_similarity",
    "normalize_term",
    "normalized_terms",
    "tfidf_rank",
    "token_set",
    "tokenize",
    "top_terms",
]
