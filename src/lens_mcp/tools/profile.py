"""lens_profile: identity, social graph, influence and activity of an account."""

from collections.abc import Awaitable, Mapping
from typing import Any

import structlog
from mcp.types import CallToolResult

from lens_mcp.lens.client import LensClient
from lens_mcp.lens.models import PageSize, page_size_for
from lens_mcp.response_optimizer.formatter import ResponseFormatter
from lens_mcp.tools.common import (
    account_label,
    gather_sections,
    post_emoji,
    post_text,
    resolve_account,
    shorten,
    stat,
)
from lens_mcp.tools.schemas import LensProfileInput

logger = structlog.get_logger(__name__)

ANALYSIS_INCLUDES = {
    "overview": "basic",
    "influence": "influence",
    "engagement": "activity",
    "network": "network",
}

SOCIAL_SECTIONS = (("followers", "👥 **Top Followers**"), ("following", "🔗 **Following**"))


def resolve_includes(args: LensProfileInput) -> list[str]:
    """Requested sections in order, with the one implied by ``analyze`` appended."""
    includes = list(dict.fromkeys(args.include))
    if args.analyze:
        implied = ANALYSIS_INCLUDES[args.analyze]
        if implied not in includes:
            includes.append(implied)
    return includes


def _follow_counts(stats: Any) -> tuple[int, int]:
    if not isinstance(stats, Mapping):
        return 0, 0
    follow_stats = stats.get("graphFollowStats") or {}
    return follow_stats.get("followers") or 0, follow_stats.get("following") or 0


def _average_upvotes(posts: list[Any]) -> float:
    return sum(stat(post, "upvotes") for post in posts) / max(len(posts), 1)


def _network_label(ratio: float) -> str:
    if ratio > 2:
        return "High influence"
    if ratio > 0.5:
        return "Balanced"
    return "Building network"


def _plan_fetches(
    client: LensClient, address: str, includes: list[str], page_size: PageSize
) -> dict[str, Awaitable[Any]]:
    fetches: dict[str, Awaitable[Any]] = {}
    if "basic" in includes or "influence" in includes:
        fetches["stats"] = client.fetch_account_stats(address)
    if "social" in includes:
        fetches["followers"] = client.fetch_followers(address, PageSize.TEN)
        fetches["following"] = client.fetch_following(address, PageSize.TEN)
    if "influence" in includes:
        fetches["influence_posts"] = client.fetch_posts(authors=[address], page_size=PageSize.TEN)
    if "activity" in includes:
        fetches["timeline"] = client.fetch_timeline_highlights(address, page_size)
        fetches["activity_posts"] = client.fetch_posts(authors=[address], page_size=page_size)
    if "network" in includes:
        fetches["network_followers"] = client.fetch_followers(address, page_size)
        fetches["network_following"] = client.fetch_following(address, page_size)
    return fetches


async def lens_profile(
    args: LensProfileInput, client: LensClient, formatter: ResponseFormatter
) -> CallToolResult:
    """
    Build a profile report for one account.

    Sub-fetches for all requested sections run concurrently; a section whose
    fetch fails is left out of both the summary and the data.

    Raises:
        InvalidToolInputError: If the account cannot be found
        LensApiError: If the account lookup fails
    """
    account = await resolve_account(client, args.who.strip())
    address = account.get("address") or args.who
    includes = resolve_includes(args)
    page_size = page_size_for(args.depth)

    sections = await gather_sections(_plan_fetches(client, address, includes, page_size))

    profile_data: dict[str, Any] = {"account": account}
    summary_parts: list[str] = []
    followers_count, following_count = _follow_counts(sections.get("stats"))

    for include in includes:
        if include == "basic":
            if "stats" in sections:
                profile_data["stats"] = sections["stats"]
            username = (account.get("username") or {}).get("localName") or "No username"
            bio = (account.get("metadata") or {}).get("bio") or "No bio"
            summary_parts.append(f"👤 **Profile**: {username} ({address[:10]}...)")
            summary_parts.append(
                f"📊 **Stats**: {followers_count} followers, {following_count} following"
            )
            summary_parts.append(f"📝 **Bio**: {shorten(bio, 100)}")

        elif include == "social":
            for key, label in SOCIAL_SECTIONS:
                if key in sections:
                    profile_data[key] = sections[key]
                    names = ", ".join(account_label(a) for a in sections[key]["items"][:3])
                    summary_parts.append(f"{label}: {names}")

        elif include == "influence":
            if "influence_posts" in sections:
                profile_data["recentPosts"] = sections["influence_posts"]
                avg = _average_upvotes(sections["influence_posts"]["items"])
                rate = avg / followers_count * 100 if followers_count > 0 else 0.0
                summary_parts.append(
                    f"⭐ **Influence**: {avg:.1f} avg reactions, {rate:.2f}% engagement rate"
                )

        elif include == "activity":
            if "timeline" in sections:
                profile_data["timeline"] = sections["timeline"]
                count = len(sections["timeline"]["items"])
                summary_parts.append(f"📰 **Timeline Highlights**: {count} activities")
            if "activity_posts" in sections:
                profile_data["recentPosts"] = sections["activity_posts"]
                posts = sections["activity_posts"]["items"]
                summary_parts.append(
                    f"📝 **Recent Posts**: {len(posts)} posts, "
                    f"avg {_average_upvotes(posts):.1f} reactions"
                )
                if posts:
                    top = [
                        f'  {i}. {post_emoji(post)} "{shorten(post_text(post), 60)}" '
                        f"({stat(post, 'upvotes')} ❤️, {stat(post, 'comments')} 💬)"
                        for i, post in enumerate(posts[:2], start=1)
                    ]
                    summary_parts.append("**Top Posts**:\n" + "\n".join(top))

        elif include == "network":
            if "network_followers" in sections and "network_following" in sections:
                n_followers = len(sections["network_followers"]["items"])
                n_following = len(sections["network_following"]["items"])
                ratio = n_followers / n_following if n_following > 0 else float(n_followers)
                profile_data["networkMetrics"] = {
                    "followers": n_followers,
                    "following": n_following,
                    "ratio": ratio,
                }
                summary_parts.append(
                    f"🌐 **Network**: {ratio:.2f} ratio ({_network_label(ratio)})"
                )

    logger.info("Profile analyzed", address=address, includes=includes)
    return formatter.format(profile_data, args.show, "\n".join(summary_parts))
