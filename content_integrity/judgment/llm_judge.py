"""LLM-backed judgment capability."""

from .client import Message, VLLMClient, strip_reasoning
from .schemas import SourceCandidate, SourceProposal


AI_PROBABILITY_PROMPT = (
    "You are an expert in detecting AI-generated text. Analyze the text and "
    "estimate the probability that it was written by a language model rather "
    "than a human. Return ONLY a number between 0 and 1, where 0 means "
    "certainly human-written and 1 means certainly AI-generated."
)

SOURCE_PROPOSAL_PROMPT = (
    "You are a plagiarism detection system. Analyze the text and identify if it "
    "resembles common academic sources, Wikipedia articles, or published content. "
    "Return results in JSON format."
)


class LLMJudge:
    """Judgment capability backed by a chat-completions model."""

    def __init__(self, client: VLLMClient):
        self.client = client

    async def classify_segment(self, text: str) -> str:
        """Ask for a bare probability; the answer is returned unparsed."""
        response = await self.client.chat(
            [
                Message(role="system", content=AI_PROBABILITY_PROMPT),
                Message(role="user", content=f"Text:\n\n{text}\n\nProbability (0-1):"),
            ],
            temperature=0.0,
        )
        return strip_reasoning(response.text)

    async def propose_sources(self, text: str) -> list[SourceCandidate]:
        proposal = await self.client.chat_structured(
            [
                Message(role="system", content=SOURCE_PROPOSAL_PROMPT),
                Message(
                    role="user",
                    content=f"Analyze this text for potential plagiarism sources:\n\n{text}",
                ),
            ],
            SourceProposal,
        )
        return proposal.sources

    async def close(self) -> None:
        await self.client.close()
