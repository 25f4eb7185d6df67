"""Content Integrity - plagiarism and AI-content detection engine."""

__version__ = "0.1.0"

from .config import AppConfig, get_config, load_config
from .models import (
    AIContentResult,
    AIContentSegment,
    PlagiarismMatch,
    PlagiarismResult,
    TextSpan,
)
from .orchestrator import AnalysisOrchestrator, AnalysisStatus, DocumentAnalysis
from .similarity import cosine_similarity, jaccard_similarity, ngram_similarity

__all__ = [
    "AppConfig",
    "get_config",
    "load_config",
    "AIContentResult",
    "AIContentSegment",
    "PlagiarismMatch",
    "PlagiarismResult",
    "TextSpan",
    "AnalysisOrchestrator",
    "AnalysisStatus",
    "DocumentAnalysis",
    "cosine_similarity",
    "jaccard_similarity",
    "ngram_similarity",
    "__version__",
]
