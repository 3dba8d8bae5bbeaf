"""Request and result types shared by the Lens API client and the tools."""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

MAX_ITEMS = 50


class PageSize(str, Enum):
    """Page size tiers accepted by the Lens API."""

    TEN = "TEN"
    FIFTY = "FIFTY"


class FetchKind(str, Enum):
    """Paginated collections the client can fetch."""

    ACCOUNTS = "accounts"
    POSTS = "posts"
    POSTS_TO_EXPLORE = "posts_to_explore"
    POST_REACTIONS = "post_reactions"
    POST_REFERENCES = "post_references"
    TIMELINE_HIGHLIGHTS = "timeline_highlights"
    FOLLOWERS = "followers"
    FOLLOWING = "following"
    APPS = "apps"
    GROUPS = "groups"
    USERNAMES = "usernames"


class ReactionType(str, Enum):
    UPVOTE = "UPVOTE"
    DOWNVOTE = "DOWNVOTE"


class ReferenceType(str, Enum):
    COMMENT_ON = "COMMENT_ON"
    QUOTE_OF = "QUOTE_OF"
    REPOST_OF = "REPOST_OF"


class PageInfo(BaseModel):
    """Cursor-based page information; ``has_next`` follows from the ``next`` cursor."""

    prev: str | None = Field(default=None, description="Cursor of the previous page")
    next: str | None = Field(default=None, description="Cursor of the next page")

    @property
    def has_next(self) -> bool:
        return bool(self.next)

    def to_dict(self) -> dict[str, Any]:
        return {"prev": self.prev, "next": self.next, "hasNext": self.has_next}


def page_size_for(limit: int, max_items: int = MAX_ITEMS) -> PageSize:
    """
    Map a requested item count to the smallest page size tier that covers it.

    The limit is clamped to ``max_items`` first, so anything above ten items
    uses the fifty tier.
    """
    return PageSize.TEN if min(limit, max_items) <= 10 else PageSize.FIFTY


def to_envelope(
    payload: Mapping[str, Any] | None, item_key: str | None = None
) -> dict[str, Any]:
    """
    Convert a paginated GraphQL payload into a ``{items, pageInfo}`` envelope.

    Args:
        payload: The ``{items, pageInfo}`` object returned by a Lens query
        item_key: Key to unwrap from every item (followers and following
            wrap each account in ``follower`` / ``following``)

    Returns:
        A new envelope with ``pageInfo.hasNext`` filled in
    """
    payload = payload or {}
    items = list(payload.get("items") or [])
    if item_key:
        items = [
            item[item_key] if isinstance(item, Mapping) and item_key in item else item
            for item in items
        ]
    page_info = PageInfo.model_validate(payload.get("pageInfo") or {})
    return {"items": items, "pageInfo": page_info.to_dict()}
