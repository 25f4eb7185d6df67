"""Candidate source matching against the reference corpus and external proposals."""

from typing import Sequence

from ..config import DetectionConfig, get_config
from ..corpus import DEFAULT_CORPUS, ReferenceDocument
from ..evidence import gather_evidence
from ..judgment.base import JudgmentCapability
from ..judgment.schemas import SourceCandidate
from ..models import SOURCE_TYPE_DATABASE, PlagiarismMatch, TextSpan
from ..similarity import clamp, cosine_similarity
from ..utils.logging import get_logger

logger = get_logger("source_matcher")


class SourceMatcher:
    """Produces plagiarism match candidates from two independent strategies.

    1. Corpus comparison: cosine similarity against each reference text.
    2. External proposal: the judge suggests plausible real-world sources
       for the leading part of the text.

    Results are concatenated without deduplication; the same title may
    appear once per strategy with different scores.
    """

    def __init__(
        self,
        judge: JudgmentCapability,
        corpus: Sequence[ReferenceDocument] = DEFAULT_CORPUS,
        config: DetectionConfig | None = None,
    ):
        self.judge = judge
        self.corpus = tuple(corpus)
        self.config = config or get_config().detection

    async def find_matches(self, text: str) -> list[PlagiarismMatch]:
        """Run both strategies and concatenate their matches."""
        matches = self.compare_with_corpus(text)
        matches.extend(await self.search_external_sources(text))
        return matches

    def compare_with_corpus(self, text: str) -> list[PlagiarismMatch]:
        """Match text against every reference document above the threshold."""
        matches: list[PlagiarismMatch] = []
        if not text:
            return matches

        span = TextSpan.leading(text, self.config.corpus_excerpt_chars)
        for doc in self.corpus:
            similarity = cosine_similarity(text, doc.text)
            if similarity > self.config.match_threshold:
                matches.append(
                    PlagiarismMatch(
                        source_type=SOURCE_TYPE_DATABASE,
                        source_title=doc.title,
                        similarity_score=similarity,
                        matched_text=span.extract(text),
                        original_text=doc.text,
                        start_position=span.start,
                        end_position=span.end,
                    )
                )

        logger.debug(f"Corpus comparison: {len(matches)}/{len(self.corpus)} references matched")
        return matches

    async def search_external_sources(self, text: str) -> list[PlagiarismMatch]:
        """Turn judge-proposed sources into matches.

        A failed or malformed proposal contributes no matches.
        """
        if not text:
            return []

        candidates = await gather_evidence(
            lambda: self.judge.propose_sources(text[: self.config.proposal_chars]),
            fallback=[],
            source="source proposal",
        )

        span = TextSpan.leading(text, self.config.source_excerpt_chars)
        excerpt = span.extract(text)
        matches = [
            PlagiarismMatch(
                source_type=candidate.type,
                source_title=candidate.title,
                similarity_score=clamp(candidate.similarity),
                matched_text=excerpt,
                original_text=excerpt,
                start_position=span.start,
                end_position=span.end,
            )
            for candidate in candidates
            if self._accept(candidate)
        ]

        logger.debug(f"External proposal: {len(matches)}/{len(candidates)} candidates accepted")
        return matches

    def _accept(self, candidate: SourceCandidate) -> bool:
        return clamp(candidate.similarity) > self.config.match_threshold
