"""Input models for the Lens tools."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from lens_mcp.lens.models import MAX_ITEMS
from lens_mcp.response_optimizer.models import ResponseFormat

SearchType = Literal["accounts", "posts", "usernames", "apps", "groups"]
ProfileInclude = Literal["basic", "social", "influence", "activity", "network"]
ProfileAnalysis = Literal["overview", "influence", "engagement", "network"]
ContentAbout = Literal["posts", "reactions", "references", "highlights"]
ContentInclude = Literal["likes", "dislikes", "comments", "quotes", "reposts", "metrics"]
EcosystemView = Literal["trending", "apps", "groups", "statistics", "insights"]
Timeframe = Literal["1d", "7d", "30d", "all"]

MAX_DEPTH = 100


class SearchFilters(BaseModel):
    namespace: str | None = Field(default=None, description="Username namespace to filter by")


class LensSearchInput(BaseModel):
    """Arguments of the lens_search tool."""

    model_config = ConfigDict(populate_by_name=True)

    search_for: str | None = Field(
        default=None,
        alias="for",
        description='What you want to find (natural language): "crypto accounts", '
        '"DeFi posts", "lens usernames", "popular apps"',
    )
    query: str = Field(description="Search terms or keywords")
    type: SearchType | None = Field(default=None, description="Type of content to search for")
    show: ResponseFormat = Field(
        default=ResponseFormat.CONCISE, description="How much detail to include"
    )
    limit: int = Field(
        default=10, ge=1, le=MAX_ITEMS, description="Maximum results to return per page"
    )
    cursor: str | None = Field(
        default=None,
        description="Pagination cursor to fetch next page of results (returned in previous response)",
    )
    filters: SearchFilters | None = None


class LensProfileInput(BaseModel):
    """Arguments of the lens_profile tool."""

    who: str = Field(description="Ethereum address or username of the account to analyze")
    include: list[ProfileInclude] = Field(
        default_factory=lambda: ["basic"],
        description="What information to include: basic info, social connections, "
        "influence metrics, recent activity, or network analysis",
    )
    analyze: ProfileAnalysis | None = Field(
        default=None, description="Type of analysis to perform on the profile"
    )
    show: ResponseFormat = Field(
        default=ResponseFormat.CONCISE, description="Level of detail in response"
    )
    depth: int = Field(
        default=25,
        ge=1,
        le=MAX_DEPTH,
        description="How many social connections or posts to analyze",
    )


class ContentFilters(BaseModel):
    author: str | None = Field(default=None, description="Filter content by specific author")
    timeframe: Timeframe | None = Field(default=None, description="Time period for analysis")


class LensContentInput(BaseModel):
    """Arguments of the lens_content tool."""

    what: str | None = Field(
        default=None,
        description='What you want to analyze (natural language): "reactions to this post", '
        '"comments on post", "popular posts by user"',
    )
    about: ContentAbout | None = Field(
        default=None, description="Type of content analysis to perform"
    )
    target: str = Field(
        description="Post ID for post analysis, or user address or username for user content"
    )
    show: ResponseFormat = Field(
        default=ResponseFormat.CONCISE, description="How detailed the analysis should be"
    )
    include: list[ContentInclude] | None = Field(
        default=None, description="What types of engagement to include"
    )
    limit: int = Field(
        default=10, ge=1, le=MAX_ITEMS, description="Maximum items to analyze per page"
    )
    cursor: str | None = Field(
        default=None, description="Pagination cursor to fetch next page of results"
    )
    filters: ContentFilters | None = None


class LensEcosystemInput(BaseModel):
    """Arguments of the lens_ecosystem tool."""

    explore: str | None = Field(
        default=None,
        description="What aspect of the ecosystem to explore (natural language): "
        '"trending apps", "platform statistics", "popular groups", "ecosystem health"',
    )
    view: EcosystemView | None = Field(
        default=None, description="Type of ecosystem view to show"
    )
    focus: str | None = Field(
        default=None, description="Specific app, group, or area to focus on (address or name)"
    )
    show: ResponseFormat = Field(
        default=ResponseFormat.CONCISE, description="Level of detail to provide"
    )
    timeframe: Timeframe = Field(default="7d", description="Time period for trending analysis")
    limit: int = Field(default=20, ge=1, le=MAX_ITEMS, description="Maximum items to return")


TOOL_INPUT_MODELS: dict[str, type[BaseModel]] = {
    "lens_search": LensSearchInput,
    "lens_profile": LensProfileInput,
    "lens_content": LensContentInput,
    "lens_ecosystem": LensEcosystemInput,
}
