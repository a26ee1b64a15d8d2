"""Token-level text similarity primitives.

Everything here is pure and deterministic: identical input always yields
identical output, including the order of ranked terms.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable, Sequence

_NON_WORD = re.compile(r"[^\w\s]+", re.UNICODE)
_UNDERSCORE = re.compile(r"_+")
_TERM_PUNCTUATION = re.compile(r"[^a-z0-9+#]+")
_TERM_SPLIT = re.compile(r"[\s,;/|()\[\]]+")

STOP_WORDS: frozenset[str] = frozenset(
    {
        # English
        "about", "above", "after", "again", "also", "among", "and", "any", "are",
        "been", "before", "being", "below", "between", "both", "but", "can",
        "could", "does", "doing", "down", "during", "each", "either", "even",
        "every", "few", "for", "from", "further", "had", "has", "have", "having",
        "her", "here", "hers", "him", "his", "how", "into", "its", "itself",
        "just", "like", "more", "most", "much", "must", "not", "now", "off",
        "once", "only", "other", "our", "ours", "out", "over", "own", "same",
        "shall", "she", "should", "some", "such", "than", "that", "the", "their",
        "them", "then", "there", "these", "they", "this", "those", "through",
        "too", "under", "until", "upon", "very", "was", "were", "what", "when",
        "where", "which", "while", "who", "whom", "whose", "why", "will", "with",
        "within", "without", "would", "you", "your", "yours", "well", "able",
        # Indonesian
        "adalah", "agar", "akan", "atau", "bagi", "bahwa", "bisa", "dalam",
        "dan", "dapat", "dari", "dengan", "di", "hingga", "ini", "itu", "juga",
        "kami", "karena", "ke", "kepada", "kita", "lebih", "maupun", "memiliki",
        "mereka", "namun", "oleh", "pada", "para", "saat", "sangat", "saya",
        "secara", "sebagai", "sedang", "sehingga", "sejak", "seperti", "serta",
        "sudah", "tentang", "tersebut", "untuk", "yaitu", "yang", "telah",
        "tidak", "antara", "setiap", "selama", "terhadap", "menjadi",
    }
)


def tokenize(text: str, min_length: int = 4) -> list[str]:
    """Lower-case word tokens with punctuation stripped and stop words removed."""
    lowered = (text or "").lower()
    cleaned = _UNDERSCORE.sub(" ", _NON_WORD.sub(" ", lowered))
    return [
        token
        for token in cleaned.split()
        if len(token) >= min_length and token not in STOP_WORDS
    ]


def token_set(text: str, min_length: int = 4) -> set[str]:
    return set(tokenize(text, min_length=min_length))


def normalize_term(term: str) -> str:
    """Punctuation-insensitive form of a term, so 'Node.js' and 'nodejs' compare equal."""
    return _TERM_PUNCTUATION.sub("", (term or "").lower())


def normalized_terms(text: str) -> set[str]:
    """All single terms and adjacent pairs of *text* in normalized form."""
    parts = [normalize_term(part) for part in _TERM_SPLIT.split((text or "").lower())]
    parts = [part for part in parts if part]
    pairs = {f"{left}{right}" for left, right in zip(parts, parts[1:])}
    return set(parts) | pairs


def jaccard_similarity(left: Iterable[str], right: Iterable[str]) -> float:
    left_set = set(left)
    right_set = set(right)
    union = left_set | right_set
    if not union:
        return 0.0
    return len(left_set & right_set) / len(union)


def term_frequencies(tokens: Sequence[str]) -> dict[str, float]:
    total = len(tokens)
    if total == 0:
        return {}
    return {term: count / total for term, count in Counter(tokens).items()}


def inverse_document_frequency(term: str, documents: Sequence[Sequence[str]], index: int) -> float:
    """ln(N / (1 + df)), where df counts the corpus documents other than *index* that contain *term*."""
    total = len(documents)
    containing = sum(
        1 for position, document in enumerate(documents) if position != index and term in document
    )
    return math.log(total / (1 + containing))


def tfidf_rank(documents: Sequence[Sequence[str]], index: int) -> list[tuple[str, float]]:
    """Rank the terms of ``documents[index]`` by TF-IDF, highest first.

    ``documents`` is a small corpus of token lists (typically the CV and the
    job description). Ties are broken alphabetically.
    """
    if not 0 <= index < len(documents):
        raise IndexError(f"document index {index} outside corpus of {len(documents)}")

    corpus = [set(document) for document in documents]
    frequencies = term_frequencies(documents[index])
    scored = [
        (term, tf * inverse_document_frequency(term, corpus, index))
        for term, tf in frequencies.items()
    ]
    scored.sort(key=lambda item: (-item[1], item[0]))
    return scored


def top_terms(documents: Sequence[Sequence[str]], index: int, limit: int) -> list[str]:
    return [term for term, _ in tfidf_rank(documents, index)[:limit]]
