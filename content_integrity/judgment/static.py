"""Deterministic judgment capability backed by fixed answers."""

from typing import Sequence

from .schemas import SourceCandidate


class StaticJudge:
    """Judge that replays fixed answers instead of calling a model.

    Classification answers are looked up by exact segment text first, then
    consumed in call order from ``probabilities``, then ``default_probability``.
    An answer that is an ``Exception`` instance is raised instead of returned.
    """

    def __init__(
        self,
        probabilities: Sequence[str | float | Exception] = (),
        sources: Sequence[SourceCandidate] | Exception = (),
        by_text: dict[str, str | float | Exception] | None = None,
        default_probability: str | float = "0",
    ):
        self._probabilities = list(probabilities)
        self._sources = sources
        self._by_text = dict(by_text or {})
        self.default_probability = default_probability
        self.classified: list[str] = []
        self.proposal_requests: list[str] = []

    async def classify_segment(self, text: str) -> str | float:
        self.classified.append(text)
        if text in self._by_text:
            answer = self._by_text[text]
        elif self._probabilities:
            answer = self._probabilities.pop(0)
        else:
            answer = self.default_probability
        if isinstance(answer, Exception):
            raise answer
        return answer

    async def propose_sources(self, text: str) -> list[SourceCandidate]:
        self.proposal_requests.append(text)
        if isinstance(self._sources, Exception):
            raise self._sources
        return list(self._sources)

    async def close(self) -> None:
        return None
