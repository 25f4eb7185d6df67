"""Document-level analysis combining both detectors."""

import asyncio
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Sequence

from .config import AppConfig, get_config
from .corpus import DEFAULT_CORPUS, ReferenceDocument
from .detectors import AIContentDetector, PlagiarismDetector, SegmentClassifier, SourceMatcher
from .judgment.base import JudgmentCapability
from .judgment.client import VLLMClient
from .judgment.llm_judge import LLMJudge
from .models import AIContentResult, PlagiarismMatch, PlagiarismResult
from .text import normalize_text, text_stats
from .utils.logging import LogContext, get_logger

logger = get_logger("orchestrator")


class AnalysisStatus(str, Enum):
    """Lifecycle of a persisted analysis record."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class DocumentAnalysis:
    """Both verdicts for one document plus their combined confidence."""

    plagiarism: PlagiarismResult
    ai_content: AIContentResult
    word_count: int = 0
    char_count: int = 0
    status: AnalysisStatus = AnalysisStatus.COMPLETED
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def combined_confidence(self) -> float:
        """Arithmetic mean of the two detectors' confidence scores."""
        return round(
            (self.plagiarism.confidence_score + self.ai_content.confidence_score) / 2, 2
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "plagiarism": self.plagiarism.to_dict(),
            "ai": self.ai_content.to_dict(),
            "combined_confidence": self.combined_confidence,
            "word_count": self.word_count,
            "char_count": self.char_count,
            "status": self.status.value,
            "completed_at": self.completed_at.isoformat(),
        }

    def to_record(self) -> dict[str, Any]:
        """Flat record for persistence; full results go in ``analysis_data``."""
        return {
            "plagiarism_percentage": self.plagiarism.overall_percentage,
            "ai_content_percentage": self.ai_content.overall_percentage,
            "confidence_score": self.combined_confidence,
            "total_sources": self.plagiarism.total_sources,
            "status": self.status.value,
            "completed_at": self.completed_at.isoformat(),
            "analysis_data": json.dumps(
                {"plagiarism": self.plagiarism.to_dict(), "ai": self.ai_content.to_dict()},
                ensure_ascii=False,
            ),
        }


class AnalysisOrchestrator:
    """Runs the plagiarism and AI-content detectors over one document.

    Both detectors run concurrently and are awaited to completion; neither
    raises, so an analysis always completes (possibly with no evidence).
    """

    def __init__(
        self,
        judge: JudgmentCapability,
        config: AppConfig | None = None,
        corpus: Sequence[ReferenceDocument] = DEFAULT_CORPUS,
    ):
        self.judge = judge
        self.config = config or get_config()

        detection = self.config.detection
        self.plagiarism_detector = PlagiarismDetector(SourceMatcher(judge, corpus, detection))
        self.ai_detector = AIContentDetector(SegmentClassifier(judge, detection))

    @classmethod
    def from_config(cls, config: AppConfig | None = None) -> "AnalysisOrchestrator":
        """Build the production stack: vLLM client behind an LLM judge."""
        config = config or get_config()
        return cls(LLMJudge(VLLMClient(config.llm)), config)

    async def close(self) -> None:
        close = getattr(self.judge, "close", None)
        if close is not None:
            await close()

    async def analyze(self, text: str) -> DocumentAnalysis:
        """Analyze a document for copied and AI-generated content."""
        normalized = normalize_text(text)
        stats = text_stats(normalized)

        with LogContext(f"Analyzing document ({stats.word_count} words)", logger):
            plagiarism, ai_content = await asyncio.gather(
                self.plagiarism_detector.detect(normalized),
                self.ai_detector.detect(normalized),
            )

        analysis = DocumentAnalysis(
            plagiarism=plagiarism,
            ai_content=ai_content,
            word_count=stats.word_count,
            char_count=stats.char_count,
        )
        logger.info(
            f"Analysis complete: plagiarism {plagiarism.overall_percentage}%, "
            f"AI {ai_content.overall_percentage}%, confidence {analysis.combined_confidence}"
        )
        return analysis

    async def analyze_text_segments(
        self, text: str, segment_size: int | None = None
    ) -> list[PlagiarismMatch]:
        """Chunked plagiarism analysis for oversized documents."""
        if segment_size is None:
            segment_size = self.config.detection.plagiarism_segment_size
        return await self.plagiarism_detector.detect_in_chunks(normalize_text(text), segment_size)
