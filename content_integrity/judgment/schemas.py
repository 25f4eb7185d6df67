"""Pydantic schemas for structured judgment output."""

from pydantic import BaseModel, ConfigDict, Field


class SourceCandidate(BaseModel):
    """A plausible real-world source proposed for the text."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., description="Title of the source")
    type: str = Field(..., description="Kind of source, e.g. wikipedia, journal, website")
    similarity: float = Field(..., description="Estimated similarity between 0 and 1")


class SourceProposal(BaseModel):
    """Structured response of a source-proposal request."""

    model_config = ConfigDict(extra="ignore")

    sources: list[SourceCandidate] = Field(default_factory=list)
