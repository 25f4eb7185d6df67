"""Per-segment AI-generation scoring."""

import asyncio

from ..config import DetectionConfig, get_config
from ..errors import MalformedSegment
from ..evidence import coerce_probability, gather_evidence
from ..judgment.base import JudgmentCapability
from ..models import DETECTION_METHOD_LLM, AIContentSegment
from ..text import TextSegment, split_into_segments
from ..utils.logging import get_logger
from ..utils.metrics import get_operation_metrics

logger = get_logger("segment_classifier")


class SegmentClassifier:
    """Splits text into word windows and scores each with the judge.

    Judgment calls fan out with at most ``config.max_concurrent`` in flight;
    segments are returned in document order regardless of completion order.
    """

    def __init__(self, judge: JudgmentCapability, config: DetectionConfig | None = None):
        self.judge = judge
        self.config = config or get_config().detection

    async def classify(self, text: str, segment_size: int | None = None) -> list[AIContentSegment]:
        """Score every segment of text.

        Args:
            text: Document text (normalized internally)
            segment_size: Words per segment (defaults to ``config.ai_segment_size``)

        Returns:
            One AIContentSegment per segment, in document order
        """
        if segment_size is None:
            segment_size = self.config.ai_segment_size
        segments = split_into_segments(text, segment_size)
        if not segments:
            return []

        semaphore = asyncio.Semaphore(self.config.max_concurrent)

        async def score_one(segment: TextSegment) -> AIContentSegment:
            async with semaphore:
                probability = await self._score(segment)
            return AIContentSegment(
                text_segment=segment.text,
                ai_probability=probability,
                start_position=segment.start,
                end_position=segment.end,
                detection_method=DETECTION_METHOD_LLM,
            )

        logger.debug(f"Classifying {len(segments)} segments")
        return list(await asyncio.gather(*(score_one(s) for s in segments)))

    async def _score(self, segment: TextSegment) -> float:
        raw = await gather_evidence(
            lambda: self.judge.classify_segment(segment.text),
            fallback=0.0,
            source=f"segment {segment.index} classification",
        )
        try:
            return coerce_probability(raw)
        except MalformedSegment as e:
            get_operation_metrics().increment("malformed_segment")
            logger.warning(
                f"Segment {segment.index}: {e}; defaulting probability to 0",
                extra={"evidence_source": f"segment {segment.index} classification"},
            )
            return 0.0
