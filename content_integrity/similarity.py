"""Lexical similarity metrics.

All functions accept arbitrary strings (including empty ones), never raise,
and return a score clamped to [0, 1]. Tokens are lower-cased,
whitespace-delimited words; punctuation stays attached to its word.

Degenerate inputs score 0: with no content on either side, no similarity
can be asserted.
"""

import math
from collections import Counter
from typing import Sequence


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]; NaN maps to low."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def tokenize(text: str) -> list[str]:
    """Tokenize text into lower-cased words."""
    return text.lower().split()


def get_ngrams(tokens: Sequence[str], n: int = 3) -> list[tuple[str, ...]]:
    """Extract contiguous n-word sequences.

    A sequence shorter than ``n`` has no n-grams.
    """
    if n < 1 or len(tokens) < n:
        return []
    return [tuple(tokens[i : i + n]) for i in range(len(tokens) - n + 1)]


def _set_jaccard(set1: set, set2: set) -> float:
    union = set1 | set2
    if not union:
        return 0.0
    return clamp(len(set1 & set2) / len(union))


def jaccard_similarity(text1: str, text2: str) -> float:
    """Jaccard coefficient of the two word sets.

    J(A,B) = |A ∩ B| / |A ∪ B|
    """
    return _set_jaccard(set(tokenize(text1)), set(tokenize(text2)))


def cosine_similarity(text1: str, text2: str) -> float:
    """Cosine similarity of term-frequency vectors over the shared vocabulary."""
    freq1 = Counter(tokenize(text1))
    freq2 = Counter(tokenize(text2))

    if not freq1 or not freq2:
        return 0.0

    vocabulary = freq1.keys() | freq2.keys()
    dot_product = sum(freq1[word] * freq2[word] for word in vocabulary)
    norm1_sq = sum(v * v for v in freq1.values())
    norm2_sq = sum(v * v for v in freq2.values())

    # Integer products keep identical texts at exactly 1.0
    return clamp(dot_product / math.sqrt(norm1_sq * norm2_sq))


def ngram_similarity(text1: str, text2: str, n: int = 3) -> float:
    """Jaccard coefficient of the two n-gram sets."""
    ngrams1 = set(get_ngrams(tokenize(text1), n))
    ngrams2 = set(get_ngrams(tokenize(text2), n))
    return _set_jaccard(ngrams1, ngrams2)


def similarity_breakdown(text1: str, text2: str, n: int = 3) -> dict[str, float]:
    """All three metrics for a text pair."""
    return {
        "jaccard": jaccard_similarity(text1, text2),
        "cosine": cosine_similarity(text1, text2),
        "ngram": ngram_similarity(text1, text2, n),
    }
