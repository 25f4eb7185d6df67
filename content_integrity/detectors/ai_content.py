"""AI-content detector: segment classification followed by aggregation."""

from ..aggregation import aggregate_ai_content
from ..evidence import detector_boundary
from ..models import AIContentResult
from ..utils.logging import get_logger
from .segment_classifier import SegmentClassifier

logger = get_logger("ai_content")


class AIContentDetector:
    """Estimates machine-generated content with per-segment attribution."""

    def __init__(self, classifier: SegmentClassifier):
        self.classifier = classifier

    @detector_boundary("AI-content detector", AIContentResult.failed)
    async def detect(self, text: str, segment_size: int | None = None) -> AIContentResult:
        """Detect AI-generated content in text.

        Never raises: an internal failure yields ``AIContentResult.failed()``.
        """
        segments = await self.classifier.classify(text, segment_size)
        result = aggregate_ai_content(segments)
        logger.info(
            f"AI content: {result.overall_percentage}% over {len(result.segments)} segments "
            f"(confidence {result.confidence_score})"
        )
        return result
