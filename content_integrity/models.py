"""Data models for detection results."""

from dataclasses import dataclass, field
from typing import Any

SOURCE_TYPE_DATABASE = "database"
DETECTION_METHOD_LLM = "llm_judgment"


@dataclass(frozen=True)
class TextSpan:
    """Character offsets ``[start, end)`` into the normalized document text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    @classmethod
    def leading(cls, text: str, length: int) -> "TextSpan":
        """Span covering at most the first ``length`` characters of text."""
        return cls(0, min(length, len(text)))

    def extract(self, text: str) -> str:
        """Return the spanned substring; raises if the span overruns text."""
        if self.end > len(text):
            raise ValueError(f"Span [{self.start}, {self.end}) exceeds text length {len(text)}")
        return text[self.start : self.end]


@dataclass
class PlagiarismMatch:
    """One candidate source match."""

    source_type: str
    similarity_score: float
    matched_text: str  # Excerpt of the analysed text
    original_text: str  # Reference content
    start_position: int
    end_position: int
    source_url: str | None = None
    source_title: str | None = None

    @property
    def span(self) -> TextSpan:
        return TextSpan(self.start_position, self.end_position)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "source_url": self.source_url,
            "source_title": self.source_title,
            "source_type": self.source_type,
            "similarity_score": self.similarity_score,
            "matched_text": self.matched_text,
            "original_text": self.original_text,
            "start_position": self.start_position,
            "end_position": self.end_position,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlagiarismMatch":
        """Deserialize from dictionary."""
        return cls(
            source_type=data["source_type"],
            similarity_score=data["similarity_score"],
            matched_text=data.get("matched_text", ""),
            original_text=data.get("original_text", ""),
            start_position=data.get("start_position", 0),
            end_position=data.get("end_position", 0),
            source_url=data.get("source_url"),
            source_title=data.get("source_title"),
        )


@dataclass
class AIContentSegment:
    """AI-generation likelihood for one word window of the document."""

    text_segment: str
    ai_probability: float
    start_position: int
    end_position: int
    detection_method: str = DETECTION_METHOD_LLM

    @property
    def span(self) -> TextSpan:
        return TextSpan(self.start_position, self.end_position)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "text_segment": self.text_segment,
            "ai_probability": self.ai_probability,
            "start_position": self.start_position,
            "end_position": self.end_position,
            "detection_method": self.detection_method,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AIContentSegment":
        """Deserialize from dictionary."""
        return cls(
            text_segment=data["text_segment"],
            ai_probability=data["ai_probability"],
            start_position=data.get("start_position", 0),
            end_position=data.get("end_position", 0),
            detection_method=data.get("detection_method", DETECTION_METHOD_LLM),
        )


@dataclass
class PlagiarismResult:
    """Plagiarism verdict: matches ranked by similarity, strongest first."""

    overall_percentage: float = 0.0
    matches: list[PlagiarismMatch] = field(default_factory=list)
    total_sources: int = 0
    confidence_score: float = 0.0

    @classmethod
    def failed(cls) -> "PlagiarismResult":
        """Zero-evidence result substituted when the detector itself fails."""
        return cls(overall_percentage=0, matches=[], total_sources=0, confidence_score=0)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "overall_percentage": self.overall_percentage,
            "matches": [m.to_dict() for m in self.matches],
            "total_sources": self.total_sources,
            "confidence_score": self.confidence_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlagiarismResult":
        """Deserialize from dictionary."""
        return cls(
            overall_percentage=data.get("overall_percentage", 0.0),
            matches=[PlagiarismMatch.from_dict(m) for m in data.get("matches", [])],
            total_sources=data.get("total_sources", 0),
            confidence_score=data.get("confidence_score", 0.0),
        )


@dataclass
class AIContentResult:
    """AI-content verdict: segments in document order."""

    overall_percentage: float = 0.0
    segments: list[AIContentSegment] = field(default_factory=list)
    confidence_score: float = 0.0

    @classmethod
    def failed(cls) -> "AIContentResult":
        """Zero-evidence result substituted when the detector itself fails."""
        return cls(overall_percentage=0, segments=[], confidence_score=0)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "overall_percentage": self.overall_percentage,
            "segments": [s.to_dict() for s in self.segments],
            "confidence_score": self.confidence_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AIContentResult":
        """Deserialize from dictionary."""
        return cls(
            overall_percentage=data.get("overall_percentage", 0.0),
            segments=[AIContentSegment.from_dict(s) for s in data.get("segments", [])],
            confidence_score=data.get("confidence_score", 0.0),
        )
