"""Recursive pruning of nested Lens API results.

Arrays are never shortened: only the fields inside their elements are dropped.
Known entity shapes are routed through the entity reducers first.
"""

import json
from collections.abc import Mapping
from typing import Any

import structlog

from lens_mcp.response_optimizer.pruning import is_pruned_field
from lens_mcp.response_optimizer.reducers import ENTITY_REDUCERS, entity_kind
from lens_mcp.response_optimizer.token_counter import CHARS_PER_TOKEN

logger = structlog.get_logger(__name__)


def serialized_size(value: Any) -> int:
    """Character length of the compact JSON form of a value."""
    return len(json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str))


def _is_empty_value(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _prune_mapping(obj: Mapping[str, Any]) -> dict[str, Any]:
    pruned: dict[str, Any] = {}
    for key, value in obj.items():
        if is_pruned_field(key) or _is_empty_value(value):
            continue
        if isinstance(value, Mapping):
            nested = prune_structure(value)
            # A nested object is only dropped when nothing survives inside it
            if isinstance(nested, Mapping) and not nested:
                continue
            pruned[key] = nested
        elif isinstance(value, list | tuple):
            pruned[key] = prune_structure(value)
        else:
            pruned[key] = value
    return pruned


def prune_structure(value: Any) -> Any:
    """
    Strip low-value fields from a nested value without the size fast path.

    Mappings recognised as posts or accounts are projected by their reducer;
    other mappings lose denylisted keys and null or empty-string values.
    Sequences keep every element, in order.

    Args:
        value: Any JSON-like value

    Returns:
        A new pruned structure, or the value itself for scalars
    """
    if isinstance(value, Mapping):
        reducer = ENTITY_REDUCERS.get(entity_kind(value))
        if reducer is not None:
            return reducer(value)
        return _prune_mapping(value)
    if isinstance(value, list | tuple):
        return [prune_structure(item) for item in value]
    return value


class StructureOptimizer:
    """Shrinks nested result data so detailed responses fit a token target."""

    def __init__(self, chars_per_token: int = CHARS_PER_TOKEN):
        self.chars_per_token = chars_per_token

    def optimize(self, value: Any, target_tokens: int) -> Any:
        """
        Optimize a value for a token target.

        Payloads already below ``target_tokens`` are returned unchanged.
        The result is never larger than the input, and optimizing an already
        optimized value returns it unchanged.

        Args:
            value: Result data, usually a ``{items, pageInfo}`` envelope
            target_tokens: Size below which no optimization is needed

        Returns:
            The optimized value
        """
        if not isinstance(value, Mapping | list | tuple):
            return value

        original_size = serialized_size(value)
        if original_size < target_tokens * self.chars_per_token:
            return value

        optimized = prune_structure(value)
        optimized_size = serialized_size(optimized)
        if optimized_size > original_size:
            logger.debug(
                "Pruned structure is larger than the input, keeping the input",
                original_size=original_size,
                optimized_size=optimized_size,
            )
            return value

        logger.debug(
            "Optimized result structure",
            original_size=original_size,
            optimized_size=optimized_size,
            target_tokens=target_tokens,
        )
        return optimized
