"""Generic one-line summaries of result data, used when a tool has no richer one."""

from collections.abc import Mapping
from typing import Any

IDENTITY_FIELDS = ("account", "username", "address")


def generate_summary(data: Any) -> str:
    """
    Describe result data in one line.

    Args:
        data: A ``{items, pageInfo}`` envelope, a single entity or anything else

    Returns:
        Natural-language summary without any JSON
    """
    if isinstance(data, Mapping) and isinstance(data.get("items"), list | tuple):
        count = len(data["items"])
        page_info = data.get("pageInfo")
        has_more = isinstance(page_info, Mapping) and bool(page_info.get("hasNext"))
        more = " (more available)" if has_more else ""
        return f'📊 Found {count} items{more}. Use show="detailed" for complete data.'

    if isinstance(data, Mapping) and any(data.get(field) for field in IDENTITY_FIELDS):
        return '👤 Profile data retrieved. Use show="detailed" for complete information.'

    return '✅ Data retrieved successfully. Use show="detailed" for complete information.'
