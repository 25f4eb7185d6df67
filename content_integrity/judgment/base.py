"""Interface of the generative judgment capability."""

from typing import Protocol, runtime_checkable

from .schemas import SourceCandidate


@runtime_checkable
class JudgmentCapability(Protocol):
    """Injected, possibly non-deterministic judge.

    Implementations may raise any exception; callers route every call
    through the zero-evidence fallback.
    """

    async def classify_segment(self, text: str) -> str | float:
        """Return the raw probability answer that text is machine-generated."""
        ...

    async def propose_sources(self, text: str) -> list[SourceCandidate]:
        """Return candidate sources the text may have been copied from."""
        ...
