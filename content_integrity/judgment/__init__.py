"""Generative judgment capability: interface, LLM client and fixtures."""

from .base import JudgmentCapability
from .client import LLMResponse, Message, VLLMClient, create_client
from .llm_judge import LLMJudge
from .schemas import SourceCandidate, SourceProposal
from .static import StaticJudge

__all__ = [
    "JudgmentCapability",
    "LLMJudge",
    "LLMResponse",
    "Message",
    "SourceCandidate",
    "SourceProposal",
    "StaticJudge",
    "VLLMClient",
    "create_client",
]
