"""Helpers shared by the Lens tool handlers."""

import asyncio
import re
from collections.abc import Awaitable, Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog

from lens_mcp.exceptions import InvalidToolInputError, LensApiError
from lens_mcp.lens.client import LensClient
from lens_mcp.lens.models import PageSize
from lens_mcp.response_optimizer.reducers import post_type

logger = structlog.get_logger(__name__)

EVM_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
NUMERIC_POST_ID_PATTERN = re.compile(r"^\d{60,}$")

TIMEFRAME_WINDOWS = {
    "1d": timedelta(days=1),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}

POST_TYPE_EMOJI = {
    "comment": "💬",
    "quote": "🔄",
    "mirror": "🪞",
    "post": "📝",
}


def is_valid_evm_address(value: Any) -> bool:
    """Check for a 0x-prefixed, 40 hex digit address."""
    return isinstance(value, str) and EVM_ADDRESS_PATTERN.match(value) is not None


def looks_like_post_id(value: str) -> bool:
    """Check whether a target string addresses a post rather than an account."""
    return NUMERIC_POST_ID_PATTERN.match(value) is not None or value.startswith("post_")


def shorten(text: str, length: int) -> str:
    """Cut text to ``length`` characters, marking the cut with an ellipsis."""
    if len(text) <= length:
        return text
    return f"{text[:length]}..."


def _nested_content(value: Any) -> str | None:
    if isinstance(value, Mapping):
        metadata = value.get("metadata")
        if isinstance(metadata, Mapping) and isinstance(metadata.get("content"), str):
            return metadata["content"] or None
    return None


def post_text(post: Mapping[str, Any]) -> str:
    """Text of a post, falling back to the post it comments on, quotes or reposts."""
    for source in (post, post.get("root"), post.get("commentOn"), post.get("repostOf")):
        content = _nested_content(source)
        if content:
            return content
    return "No content"


def account_label(account: Any, address_chars: int = 8) -> str:
    """Username of an account, or the start of its address."""
    if not isinstance(account, Mapping):
        return "Unknown"
    username = account.get("username")
    if isinstance(username, Mapping) and username.get("localName"):
        return username["localName"]
    address = account.get("address")
    if isinstance(address, str) and address:
        return address[:address_chars]
    return "Unknown"


def stat(entity: Mapping[str, Any], name: str) -> int:
    stats = entity.get("stats")
    if not isinstance(stats, Mapping):
        return 0
    value = stats.get(name)
    return value if isinstance(value, int | float) and not isinstance(value, bool) else 0


def engagement_line(post: Mapping[str, Any], include_reposts: bool = True) -> str:
    """Upvote, comment and repost counters of a post as one short line."""
    parts = [f"{stat(post, 'upvotes')} ❤️", f"{stat(post, 'comments')} 💬"]
    if include_reposts:
        parts.append(f"{stat(post, 'reposts')} 🔄")
    return f"({', '.join(parts)})"


def post_emoji(post: Mapping[str, Any]) -> str:
    return POST_TYPE_EMOJI.get(post_type(post), "📄")


def metadata_text(entity: Any, key: str) -> str | None:
    if not isinstance(entity, Mapping):
        return None
    metadata = entity.get("metadata")
    if isinstance(metadata, Mapping) and isinstance(metadata.get(key), str):
        return metadata[key] or None
    return None


def matches_text(entity: Any, query: str) -> bool:
    """Check whether an app or group name or description contains the query."""
    needle = query.lower()
    return any(
        needle in value.lower()
        for value in (metadata_text(entity, "name"), metadata_text(entity, "description"))
        if value
    )


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def filter_by_timeframe(
    items: Sequence[Any], timeframe: str | None, now: datetime | None = None
) -> list[Any]:
    """
    Keep the items whose ``timestamp`` falls within a timeframe.

    Items without a parseable timestamp are kept. ``all`` and None keep
    everything.

    Args:
        items: Posts or other timestamped entities
        timeframe: One of 1d, 7d, 30d or all
        now: Reference time, the current UTC time when omitted

    Returns:
        A new list with the matching items in their original order
    """
    window = TIMEFRAME_WINDOWS.get(timeframe or "all")
    if window is None:
        return list(items)
    cutoff = (now or datetime.now(UTC)) - window
    kept = []
    for item in items:
        timestamp = _parse_timestamp(item.get("timestamp")) if isinstance(item, Mapping) else None
        if timestamp is None or timestamp >= cutoff:
            kept.append(item)
    return kept


async def resolve_account(client: LensClient, identifier: str) -> dict[str, Any]:
    """
    Find an account by address or username.

    Usernames are resolved through account search, taking the first match.

    Raises:
        InvalidToolInputError: If no account matches
        LensApiError: If the lookup fails
    """
    if is_valid_evm_address(identifier):
        try:
            account = await client.fetch_account(identifier)
        except LensApiError as e:
            raise LensApiError(f"Failed to fetch account: {e}", e.status_code) from e
        if not account:
            raise InvalidToolInputError(
                "Account not found",
                suggestion="Check the address, or search for the account with lens_search",
            )
        return account

    try:
        result = await client.fetch_accounts(identifier, page_size=PageSize.TEN)
    except LensApiError as e:
        raise LensApiError(f"Failed to search for user: {e}", e.status_code) from e
    if not result["items"]:
        raise InvalidToolInputError(
            f'No user found with username "{identifier}"',
            suggestion=f'Try lens_search(query="{identifier}", type="accounts") to find similar names',
        )
    return result["items"][0]


async def gather_sections(sections: Mapping[str, Awaitable[Any]]) -> dict[str, Any]:
    """
    Await independent sub-fetches concurrently.

    A failed sub-fetch is logged and left out of the returned mapping, so the
    caller can render whatever succeeded.
    """
    names = list(sections)
    results = await asyncio.gather(*sections.values(), return_exceptions=True)
    gathered: dict[str, Any] = {}
    for name, result in zip(names, results, strict=True):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning("Sub-fetch failed, omitting section", section=name, error=str(result))
            continue
        gathered[name] = result
    return gathered
