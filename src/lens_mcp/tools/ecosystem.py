"""lens_ecosystem: apps, groups, trending posts and platform-wide statistics."""

from collections import Counter
from typing import Any

import structlog
from mcp.types import CallToolResult

from lens_mcp.exceptions import InvalidToolInputError, LensApiError
from lens_mcp.lens.client import LensClient
from lens_mcp.lens.models import PageSize, page_size_for
from lens_mcp.response_optimizer.formatter import ResponseFormatter
from lens_mcp.tools.common import (
    account_label,
    engagement_line,
    filter_by_timeframe,
    gather_sections,
    matches_text,
    metadata_text,
    post_text,
    shorten,
)
from lens_mcp.tools.schemas import LensEcosystemInput

logger = structlog.get_logger(__name__)

MISSING_VIEW_SUGGESTION = (
    "Examples:\n"
    '• Popular apps: lens_ecosystem(view="apps")\n'
    '• Trending content: lens_ecosystem(view="trending")\n'
    '• Platform statistics: lens_ecosystem(view="statistics")\n'
    '• Community groups: lens_ecosystem(view="groups")'
)

# Combined item count above which the platform is reported as very active
VERY_ACTIVE_THRESHOLD = 20


def _focused(result: dict[str, Any], focus: str | None) -> dict[str, Any]:
    if not focus:
        return result
    return {**result, "items": [item for item in result["items"] if matches_text(item, focus)]}


def _catalog_lines(items: list[Any]) -> str:
    return "".join(
        f"\n• {metadata_text(entity, 'name') or 'Unknown'}: "
        f"{shorten(metadata_text(entity, 'description') or 'No description', 60)}"
        for entity in items[:10]
    )


async def _apps(args: LensEcosystemInput, client: LensClient) -> tuple[Any, str]:
    try:
        result = await client.fetch_apps(page_size_for(args.limit))
    except LensApiError as e:
        raise LensApiError(f"Failed to fetch apps: {e}", e.status_code) from e
    result = _focused(result, args.focus)
    summary = f"🚀 {len(result['items'])} applications in the Lens Protocol ecosystem:"
    return result, summary + _catalog_lines(result["items"])


async def _groups(args: LensEcosystemInput, client: LensClient) -> tuple[Any, str]:
    try:
        result = await client.fetch_groups(page_size_for(args.limit))
    except LensApiError as e:
        raise LensApiError(f"Failed to fetch groups: {e}", e.status_code) from e
    result = _focused(result, args.focus)
    summary = f"👥 {len(result['items'])} community groups on Lens Protocol:"
    return result, summary + _catalog_lines(result["items"])


async def _trending(args: LensEcosystemInput, client: LensClient) -> tuple[Any, str]:
    try:
        result = await client.fetch_posts_to_explore(page_size_for(args.limit))
    except LensApiError as e:
        raise LensApiError(f"Failed to fetch trending content: {e}", e.status_code) from e
    result = {**result, "items": filter_by_timeframe(result["items"], args.timeframe)}

    lines = "".join(
        f'\n• "{shorten(post_text(post), 80)}" by {account_label(post.get("author"))} '
        f"{engagement_line(post)}"
        for post in result["items"][:5]
    )
    return result, f"📈 {len(result['items'])} trending posts on Lens Protocol:" + lines


async def _statistics(args: LensEcosystemInput, client: LensClient) -> tuple[Any, str]:
    sections = await gather_sections(
        {
            "apps": client.fetch_apps(PageSize.TEN),
            "groups": client.fetch_groups(PageSize.TEN),
            "posts": client.fetch_posts_to_explore(PageSize.TEN),
        }
    )
    result = {
        name: sections[name]["items"] if name in sections else []
        for name in ("apps", "groups", "posts")
    }
    total = sum(len(items) for items in result.values())
    health = "Very Active" if total > VERY_ACTIVE_THRESHOLD else "Active"
    summary = (
        "📊 Lens Protocol Ecosystem Statistics:"
        f"\n🚀 Active Applications: {len(result['apps'])}+"
        f"\n👥 Community Groups: {len(result['groups'])}+"
        f"\n📝 Recent Posts: {len(result['posts'])}+ trending"
        f"\n💡 Platform Health: {health}"
    )
    return result, summary


async def _insights(args: LensEcosystemInput, client: LensClient) -> tuple[Any, str]:
    try:
        result = await client.fetch_apps(page_size_for(args.limit))
    except LensApiError as e:
        raise LensApiError(f"Failed to fetch ecosystem data: {e}", e.status_code) from e

    platforms: Counter[str] = Counter()
    for app in result["items"]:
        metadata = app.get("metadata") or {}
        platforms.update(metadata.get("platforms") or ["Other"])

    most_common = platforms.most_common(1)[0][0] if platforms else "web"
    summary = (
        "🔍 Lens Protocol Ecosystem Insights:"
        f"\n📊 Total Applications: {len(result['items'])}"
        f"\n🏷️ Platforms: {', '.join(platforms) or 'None'}"
        f"\n⭐ Most Common Platform: {most_common}"
        "\n🎯 Growth Areas: Community tools, DeFi integration, Content creation"
    )
    return {**result, "platforms": dict(platforms)}, summary


ECOSYSTEM_HANDLERS = {
    "apps": _apps,
    "groups": _groups,
    "trending": _trending,
    "statistics": _statistics,
    "insights": _insights,
}


async def lens_ecosystem(
    args: LensEcosystemInput, client: LensClient, formatter: ResponseFormatter
) -> CallToolResult:
    """
    Explore the Lens ecosystem from one point of view.

    Raises:
        InvalidToolInputError: If no view was given or inferred
        LensApiError: If a Lens request fails
    """
    if args.view is None:
        raise InvalidToolInputError(
            "I need to know what aspect of the ecosystem you want to explore.",
            suggestion=MISSING_VIEW_SUGGESTION,
        )

    result, summary = await ECOSYSTEM_HANDLERS[args.view](args, client)

    logger.info("Ecosystem explored", view=args.view)
    return formatter.format(result, args.show, summary)
