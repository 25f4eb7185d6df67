"""Plagiarism and AI-content detectors."""

from .ai_content import AIContentDetector
from .plagiarism import PlagiarismDetector
from .segment_classifier import SegmentClassifier
from .source_matcher import SourceMatcher

__all__ = [
    "AIContentDetector",
    "PlagiarismDetector",
    "SegmentClassifier",
    "SourceMatcher",
]
