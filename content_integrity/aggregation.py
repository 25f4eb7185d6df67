"""Score aggregation shared by both detectors.

Confidence blends evidence quantity and strength 20/80:

    confidence = (count * 0.2 + mean_score * 0.8) * 100

An empty evidence list yields confidence 95. That value is a product
policy carried over for behavioural compatibility: absence of evidence is
reported as a fairly confident "clean" verdict rather than an unknown.
"""

from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

from .models import AIContentResult, AIContentSegment, PlagiarismMatch, PlagiarismResult
from .similarity import clamp

T = TypeVar("T")

COUNT_WEIGHT = 0.2
STRENGTH_WEIGHT = 0.8
EMPTY_CONFIDENCE = 95.0
PERCENT_DECIMALS = 2


@dataclass(frozen=True)
class EvidenceSummary:
    """Rounded aggregate of an evidence list."""

    overall_percentage: float
    confidence_score: float
    count: int


def summarize_evidence(items: Sequence[T], score_of: Callable[[T], float]) -> EvidenceSummary:
    """Aggregate evidence items into percentage and confidence.

    Args:
        items: Matches or segments
        score_of: Accessor for the item's [0, 1] score

    Returns:
        EvidenceSummary rounded to two decimals
    """
    if not items:
        return EvidenceSummary(overall_percentage=0.0, confidence_score=EMPTY_CONFIDENCE, count=0)

    count = len(items)
    mean_score = sum(clamp(score_of(item)) for item in items) / count

    overall = clamp(mean_score * 100, 0.0, 100.0)
    confidence = clamp((count * COUNT_WEIGHT + mean_score * STRENGTH_WEIGHT) * 100, 0.0, 100.0)

    return EvidenceSummary(
        overall_percentage=round(overall, PERCENT_DECIMALS),
        confidence_score=round(confidence, PERCENT_DECIMALS),
        count=count,
    )


def aggregate_plagiarism(matches: Sequence[PlagiarismMatch]) -> PlagiarismResult:
    """Build a plagiarism result; matches are ranked strongest first."""
    summary = summarize_evidence(matches, lambda m: m.similarity_score)
    ranked = sorted(matches, key=lambda m: m.similarity_score, reverse=True)
    return PlagiarismResult(
        overall_percentage=summary.overall_percentage,
        matches=ranked,
        total_sources=summary.count,
        confidence_score=summary.confidence_score,
    )


def aggregate_ai_content(segments: Sequence[AIContentSegment]) -> AIContentResult:
    """Build an AI-content result; segments keep document order."""
    summary = summarize_evidence(segments, lambda s: s.ai_probability)
    return AIContentResult(
        overall_percentage=summary.overall_percentage,
        segments=list(segments),
        confidence_score=summary.confidence_score,
    )
