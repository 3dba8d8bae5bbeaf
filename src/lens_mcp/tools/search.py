"""lens_search: find accounts, posts, usernames, apps and groups."""

from typing import Any

import structlog
from mcp.types import CallToolResult

from lens_mcp.exceptions import InvalidToolInputError, LensApiError
from lens_mcp.lens.client import LensClient
from lens_mcp.lens.models import page_size_for
from lens_mcp.response_optimizer.formatter import ResponseFormatter
from lens_mcp.tools.common import (
    account_label,
    engagement_line,
    matches_text,
    metadata_text,
    post_emoji,
    post_text,
    shorten,
)
from lens_mcp.tools.schemas import LensSearchInput

logger = structlog.get_logger(__name__)

MISSING_SEARCH_SUGGESTION = (
    "Try this:\n"
    '• For accounts: lens_search(query="vitalik", type="accounts")\n'
    '• For posts: lens_search(query="DeFi trends", type="posts")\n'
    '• For apps: lens_search(query="social", type="apps")'
)


def _more(count: int, shown: int) -> str:
    return f"\n... and {count - shown} more" if count > shown else ""


def _accounts_summary(items: list[Any], query: str) -> str:
    lines = [
        f"\n• {account_label(account, address_chars=42)} ({account.get('address')})"
        for account in items[:5]
    ]
    return f'🔍 Found {len(items)} accounts matching "{query}":' + "".join(lines) + _more(
        len(items), 5
    )


def _posts_summary(items: list[Any], query: str) -> str:
    lines = []
    for post in items[:3]:
        author = account_label(post.get("author"), address_chars=42)
        timestamp = f" - {post['timestamp'][:10]}" if post.get("timestamp") else ""
        lines.append(
            f'\n• {post_emoji(post)} "{shorten(post_text(post), 100)}" by {author} '
            f"{engagement_line(post)}{timestamp}"
        )
    return f'📝 Found {len(items)} posts matching "{query}":' + "".join(lines) + _more(
        len(items), 3
    )


def _catalog_summary(items: list[Any], query: str, emoji: str, noun: str) -> str:
    lines = [
        f"\n• {metadata_text(entity, 'name') or 'Unknown'} - "
        f"{shorten(metadata_text(entity, 'description') or 'No description', 50)}"
        for entity in items[:5]
    ]
    return f'{emoji} Found {len(items)} {noun} matching "{query}":' + "".join(lines)


def _usernames_summary(items: list[Any], query: str) -> str:
    lines = []
    for username in items[:5]:
        namespace = f"@{username['namespace']}" if username.get("namespace") else ""
        status = "(linked)" if username.get("linkedTo") else "(unlinked)"
        lines.append(f"\n• {username.get('localName')}{namespace} {status}")
    return f'🔍 Found {len(items)} usernames matching "{query}":' + "".join(lines)


async def lens_search(
    args: LensSearchInput, client: LensClient, formatter: ResponseFormatter
) -> CallToolResult:
    """
    Search one kind of Lens entity.

    Apps and groups have no server-side text search, so a page of them is
    fetched and filtered by name and description here.

    Raises:
        InvalidToolInputError: If the query or the search type is missing
        LensApiError: If the search request fails
    """
    query = args.query.strip()
    if not query or args.type is None:
        raise InvalidToolInputError(
            "I need to know what you want to find and what type of content to search for.",
            suggestion=MISSING_SEARCH_SUGGESTION,
        )

    page_size = page_size_for(args.limit)
    namespace = args.filters.namespace if args.filters else None

    try:
        if args.type == "accounts":
            result = await client.fetch_accounts(query, page_size, args.cursor)
            summary = _accounts_summary(result["items"], query)
        elif args.type == "posts":
            result = await client.fetch_posts(
                search_query=query, page_size=page_size, cursor=args.cursor
            )
            summary = _posts_summary(result["items"], query)
        elif args.type == "apps":
            result = await client.fetch_apps(page_size, args.cursor)
            result["items"] = [app for app in result["items"] if matches_text(app, query)]
            summary = _catalog_summary(result["items"], query, "🚀", "apps")
        elif args.type == "groups":
            result = await client.fetch_groups(page_size, args.cursor)
            result["items"] = [group for group in result["items"] if matches_text(group, query)]
            summary = _catalog_summary(result["items"], query, "👥", "groups")
        else:
            result = await client.fetch_usernames(query, namespace, page_size, args.cursor)
            summary = _usernames_summary(result["items"], query)
    except LensApiError as e:
        label = "Username" if args.type == "usernames" else args.type[:-1].capitalize()
        raise LensApiError(f"{label} search failed: {e}", e.status_code) from e

    page_info = result["pageInfo"]
    shown = len(result["items"])
    response_data = {
        **result,
        "pagination": {
            "hasNext": page_info["hasNext"],
            "nextCursor": page_info["next"],
            "currentPage": shown,
            "totalShown": shown,
        },
    }
    if page_info["hasNext"]:
        summary += (
            f'\n\n🔄 **More results available** - Use cursor "{page_info["next"]}" '
            "to get next page"
        )

    logger.info("Search completed", search_type=args.type, query=query, count=shown)
    return formatter.format(response_data, args.show, summary)
