"""lens_content: posts of an account, and reactions and references of a post."""

from collections.abc import Mapping
from typing import Any

import structlog
from mcp.types import CallToolResult

from lens_mcp.exceptions import InvalidToolInputError, LensApiError
from lens_mcp.lens.client import LensClient
from lens_mcp.lens.models import ReactionType, ReferenceType, page_size_for
from lens_mcp.response_optimizer.formatter import ResponseFormatter
from lens_mcp.tools.common import (
    account_label,
    engagement_line,
    filter_by_timeframe,
    is_valid_evm_address,
    looks_like_post_id,
    post_text,
    resolve_account,
    shorten,
)
from lens_mcp.tools.schemas import LensContentInput

logger = structlog.get_logger(__name__)

MISSING_ABOUT_SUGGESTION = (
    "Examples:\n"
    '• For post reactions: lens_content(about="reactions", target="post_123")\n'
    '• For user posts: lens_content(about="posts", target="0x1234...")\n'
    '• For user posts by username: lens_content(about="posts", target="daoleno")'
)

REACTION_INCLUDES = {
    "likes": ReactionType.UPVOTE,
    "dislikes": ReactionType.DOWNVOTE,
}

REFERENCE_INCLUDES = {
    "comments": ReferenceType.COMMENT_ON,
    "quotes": ReferenceType.QUOTE_OF,
    "reposts": ReferenceType.REPOST_OF,
}


def reaction_types_for(include: list[str] | None) -> list[ReactionType]:
    return [REACTION_INCLUDES[i] for i in include or [] if i in REACTION_INCLUDES]


def reference_types_for(include: list[str] | None) -> list[ReferenceType]:
    """Reference types selected by ``include``; comments when none is selected."""
    selected = [REFERENCE_INCLUDES[i] for i in include or [] if i in REFERENCE_INCLUDES]
    return selected or [ReferenceType.COMMENT_ON]


def _require_post_target(target: str, about: str) -> None:
    if looks_like_post_id(target):
        return
    raise InvalidToolInputError(
        f"{about.capitalize()} analysis requires a post ID as target",
        suggestion=(
            f'For {about} analysis, provide a post ID like "post_123456" or a numeric post ID.\n'
            "For user-related analysis, try:\n"
            f'• lens_content(about="posts", target="{target}")\n'
            f'• lens_content(about="highlights", target="{target}")'
        ),
    )


async def _account_address(client: LensClient, identifier: str) -> str:
    if is_valid_evm_address(identifier):
        return identifier
    account = await resolve_account(client, identifier)
    return account["address"]


def _reference_label(ref: Mapping[str, Any]) -> str:
    if ref.get("__typename") == "Repost":
        return "Repost"
    if ref.get("commentOn"):
        return "Comment"
    if ref.get("quoteOf"):
        return "Quote"
    return "Post"


def _within_timeframe(result: dict[str, Any], args: LensContentInput) -> dict[str, Any]:
    timeframe = args.filters.timeframe if args.filters else None
    if not timeframe or timeframe == "all":
        return result
    return {**result, "items": filter_by_timeframe(result["items"], timeframe)}


def _reaction_label(item: Mapping[str, Any]) -> str:
    reactions = item.get("reactions") or []
    if reactions and isinstance(reactions[0], Mapping):
        return reactions[0].get("reaction") or "REACTION"
    return "REACTION"


async def _posts(args: LensContentInput, client: LensClient, target: str) -> tuple[dict, str]:
    author = args.filters.author if args.filters and args.filters.author else None
    if author is None and looks_like_post_id(target):
        raise InvalidToolInputError(
            "Posts analysis requires an account address or username as target",
            suggestion=f'To analyze a single post, try lens_content(about="references", '
            f'target="{target}")',
        )
    address = await _account_address(client, author or target)
    try:
        result = await client.fetch_posts(
            authors=[address], page_size=page_size_for(args.limit), cursor=args.cursor
        )
    except LensApiError as e:
        raise LensApiError(f"Failed to fetch posts: {e}", e.status_code) from e
    result = _within_timeframe(result, args)

    display = f"{target[:10]}..." if is_valid_evm_address(target) else target
    lines = [
        f'\n• "{shorten(post_text(post), 100)}" {engagement_line(post)}'
        + (f" - {post['timestamp'][:10]}" if post.get("timestamp") else "")
        for post in result["items"][:5]
    ]
    return result, f"📝 {len(result['items'])} posts from {display}:" + "".join(lines)


async def _reactions(
    args: LensContentInput, client: LensClient, target: str
) -> tuple[dict, str]:
    _require_post_target(target, "reactions")
    try:
        result = await client.fetch_post_reactions(
            target,
            reaction_types_for(args.include),
            page_size=page_size_for(args.limit),
            cursor=args.cursor,
        )
    except LensApiError as e:
        raise LensApiError(f"Failed to fetch reactions: {e}", e.status_code) from e

    lines = [
        f"\n• {_reaction_label(item)} by {account_label(item.get('account'), address_chars=10)}"
        for item in result["items"][:10]
    ]
    summary = f"👍 {len(result['items'])} reactions to post {target[:15]}...:" + "".join(lines)
    return result, summary


async def _references(
    args: LensContentInput, client: LensClient, target: str
) -> tuple[dict, str]:
    _require_post_target(target, "references")
    try:
        result = await client.fetch_post_references(
            target,
            reference_types_for(args.include),
            page_size=page_size_for(args.limit),
            cursor=args.cursor,
        )
    except LensApiError as e:
        raise LensApiError(f"Failed to fetch references: {e}", e.status_code) from e
    result = _within_timeframe(result, args)

    lines = [
        f"\n• {_reference_label(ref)} by {account_label(ref.get('author'), address_chars=10)}: "
        f'"{shorten(post_text(ref), 80)}"'
        for ref in result["items"][:5]
    ]
    summary = f"💬 {len(result['items'])} references to post {target[:15]}...:" + "".join(lines)
    return result, summary


async def _highlights(
    args: LensContentInput, client: LensClient, target: str
) -> tuple[dict, str]:
    address = await _account_address(client, target)
    try:
        result = await client.fetch_timeline_highlights(
            address, page_size=page_size_for(args.limit), cursor=args.cursor
        )
    except LensApiError as e:
        raise LensApiError(f"Failed to fetch highlights: {e}", e.status_code) from e
    result = _within_timeframe(result, args)

    lines = [
        f'\n• "{shorten(post_text(post), 80)}" {engagement_line(post, include_reposts=False)}'
        for post in result["items"][:5]
    ]
    summary = f"⭐ {len(result['items'])} timeline highlights for {target[:10]}...:" + "".join(
        lines
    )
    return result, summary


CONTENT_HANDLERS = {
    "posts": _posts,
    "reactions": _reactions,
    "references": _references,
    "highlights": _highlights,
}


async def lens_content(
    args: LensContentInput, client: LensClient, formatter: ResponseFormatter
) -> CallToolResult:
    """
    Analyze posts of an account or the engagement on a single post.

    Raises:
        InvalidToolInputError: If the analysis type is missing or the target
            does not fit it
        LensApiError: If a Lens request fails
    """
    target = args.target.strip()
    if args.about is None or not target:
        raise InvalidToolInputError(
            "Missing required parameters: about and target", suggestion=MISSING_ABOUT_SUGGESTION
        )

    result, summary = await CONTENT_HANDLERS[args.about](args, client, target)

    logger.info("Content analyzed", about=args.about, target=target, count=len(result["items"]))
    return formatter.format(result, args.show, summary)
