"""Pydantic models for the response optimizer."""

from enum import Enum

from pydantic import BaseModel, Field


class ResponseFormat(str, Enum):
    """How much of a result is returned to the calling agent."""

    CONCISE = "concise"
    DETAILED = "detailed"
    RAW = "raw"

    def __str__(self) -> str:
        return self.value


class OverflowPolicy(str, Enum):
    """What the formatter does when composed text exceeds the token budget."""

    TRUNCATE = "truncate"
    REFUSE = "refuse"

    def __str__(self) -> str:
        return self.value


class EntityKind(str, Enum):
    """Kinds of Lens entities the reducer knows how to project."""

    POST = "Post"
    ACCOUNT = "Account"
    OPAQUE = "opaque"


class TokenEstimate(BaseModel):
    """Result of estimating the size of a text payload."""

    tokens: int = Field(ge=0, description="Approximate token count of the text")
    within_budget: bool = Field(description="Whether the token count fits the budget")
    budget: int = Field(description="Token budget the text was measured against")


class FormatterSettings(BaseModel):
    """Size limits and overflow policies used by the response formatter."""

    max_tokens: int = Field(
        default=25000, ge=1, description="Token budget for any text returned to the agent"
    )
    target_tokens: int = Field(
        default=15000,
        ge=1,
        description="Size below which detailed data is returned without structural optimization",
    )
    chars_per_token: int = Field(default=4, ge=1, description="Characters per estimated token")
    concise_policy: OverflowPolicy = Field(default=OverflowPolicy.TRUNCATE)
    detailed_policy: OverflowPolicy = Field(default=OverflowPolicy.REFUSE)
    raw_policy: OverflowPolicy = Field(default=OverflowPolicy.REFUSE)

    def policy_for(self, response_format: ResponseFormat) -> OverflowPolicy:
        """Return the overflow policy configured for a response format."""
        if response_format == ResponseFormat.CONCISE:
            return self.concise_policy
        if response_format == ResponseFormat.DETAILED:
            return self.detailed_policy
        return self.raw_policy
