"""Maps free-text hints in tool arguments to canonical parameter values.

Each rule list is ordered; the first rule whose substring occurs in the hint
wins. Inference never overrides a parameter the caller set explicitly.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

Rules = tuple[tuple[str, str], ...]

SEARCH_TYPE_RULES: Rules = (
    ("username", "usernames"),
    ("handle", "usernames"),
    ("apps", "apps"),
    ("applications", "apps"),
    ("posts", "posts"),
    ("content", "posts"),
    ("accounts", "accounts"),
    ("profiles", "accounts"),
    ("people", "accounts"),
    ("groups", "groups"),
    ("communities", "groups"),
)

# "reposts" is listed before "posts" because it contains it
CONTENT_ABOUT_RULES: Rules = (
    ("reposts", "references"),
    ("posts", "posts"),
    ("comments", "references"),
    ("replies", "references"),
    ("quotes", "references"),
    ("references", "references"),
    ("reactions", "reactions"),
    ("likes", "reactions"),
    ("engagement", "reactions"),
    ("highlights", "highlights"),
    ("timeline", "highlights"),
)

CONTENT_INCLUDE_RULES: Rules = (
    ("comments", "references"),
    ("quotes", "references"),
    ("reposts", "references"),
    ("likes", "reactions"),
    ("dislikes", "reactions"),
)

ECOSYSTEM_VIEW_RULES: Rules = (
    ("apps", "apps"),
    ("applications", "apps"),
    ("groups", "groups"),
    ("communities", "groups"),
    ("statistics", "statistics"),
    ("stats", "statistics"),
    ("health", "statistics"),
    ("insights", "insights"),
    ("categories", "insights"),
    ("trending", "trending"),
    ("popular", "trending"),
)

# Values of ``about`` accepted for backwards compatibility
DEPRECATED_ABOUT_ALIASES = {
    "engagement": "reactions",
    "comments": "references",
}


def match_rules(hint: Any, rules: Rules) -> str | None:
    """Return the canonical value of the first rule matching a text hint."""
    if not isinstance(hint, str) or not hint:
        return None
    lowered = hint.lower()
    for substring, canonical in rules:
        if substring in lowered:
            return canonical
    return None


def _match_any(hints: Iterable[Any], rules: Rules) -> str | None:
    for substring, canonical in rules:
        if any(isinstance(hint, str) and substring in hint.lower() for hint in hints):
            return canonical
    return None


def _infer_search(arguments: dict[str, Any]) -> None:
    if arguments.get("type"):
        return
    inferred = match_rules(arguments.get("for"), SEARCH_TYPE_RULES)
    if inferred:
        arguments["type"] = inferred


def _infer_content(arguments: dict[str, Any]) -> None:
    about = arguments.get("about")
    if isinstance(about, str) and about in DEPRECATED_ABOUT_ALIASES:
        arguments["about"] = DEPRECATED_ABOUT_ALIASES[about]
        return
    if about:
        return

    include = arguments.get("include")
    inferred = None
    if isinstance(include, list | tuple):
        inferred = _match_any(include, CONTENT_INCLUDE_RULES)
    if inferred is None:
        inferred = match_rules(arguments.get("what"), CONTENT_ABOUT_RULES)
    if inferred:
        arguments["about"] = inferred


def _infer_ecosystem(arguments: dict[str, Any]) -> None:
    if arguments.get("view"):
        return
    inferred = match_rules(arguments.get("explore"), ECOSYSTEM_VIEW_RULES)
    if inferred:
        arguments["view"] = inferred


TOOL_INFERENCE = {
    "lens_search": _infer_search,
    "lens_content": _infer_content,
    "lens_ecosystem": _infer_ecosystem,
}


def apply_inference(tool_name: str, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Fill canonical parameters of a tool call from its natural-language hints.

    Args:
        tool_name: Name of the tool being called
        arguments: Raw call arguments

    Returns:
        A new argument dict; the input mapping is left untouched
    """
    inferred = dict(arguments or {})
    infer = TOOL_INFERENCE.get(tool_name)
    if infer is not None:
        infer(inferred)
        changed = {
            key: value for key, value in inferred.items() if (arguments or {}).get(key) != value
        }
        if changed:
            logger.debug("Inferred tool parameters", tool_name=tool_name, inferred=changed)
    return inferred
