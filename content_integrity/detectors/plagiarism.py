"""Plagiarism detector: source matching followed by aggregation."""

from ..aggregation import aggregate_plagiarism
from ..evidence import detector_boundary
from ..models import PlagiarismMatch, PlagiarismResult
from ..text import normalize_text, split_into_chunks
from ..utils.logging import get_logger
from .source_matcher import SourceMatcher

logger = get_logger("plagiarism")


class PlagiarismDetector:
    """Estimates copied content with attributed source matches."""

    def __init__(self, matcher: SourceMatcher):
        self.matcher = matcher

    @detector_boundary("plagiarism detector", PlagiarismResult.failed)
    async def detect(self, text: str) -> PlagiarismResult:
        """Detect plagiarism in text.

        Never raises: an internal failure yields ``PlagiarismResult.failed()``.
        """
        normalized = normalize_text(text)
        matches = await self.matcher.find_matches(normalized)
        result = aggregate_plagiarism(matches)

        if not result.matches:
            logger.info("No plagiarism evidence found")
        else:
            logger.info(
                f"Plagiarism: {result.overall_percentage}% across {result.total_sources} sources "
                f"(confidence {result.confidence_score})"
            )
        return result

    async def detect_in_chunks(self, text: str, chunk_size: int) -> list[PlagiarismMatch]:
        """Run detection per word chunk and concatenate the matches.

        Match offsets are relative to their chunk.
        """
        matches: list[PlagiarismMatch] = []
        for chunk in split_into_chunks(text, chunk_size):
            result = await self.detect(chunk)
            matches.extend(result.matches)
        return matches
