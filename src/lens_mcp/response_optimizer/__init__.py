"""Response shaping for Lens tool results: reduction, pruning, sizing and formatting."""

from lens_mcp.response_optimizer.errors import create_error_response
from lens_mcp.response_optimizer.formatter import ResponseFormatter
from lens_mcp.response_optimizer.models import (
    EntityKind,
    FormatterSettings,
    OverflowPolicy,
    ResponseFormat,
    TokenEstimate,
)
from lens_mcp.response_optimizer.reducers import reduce_entity
from lens_mcp.response_optimizer.structure_optimizer import StructureOptimizer, prune_structure
from lens_mcp.response_optimizer.summary import generate_summary
from lens_mcp.response_optimizer.token_counter import SizeEstimator, estimate_tokens

__all__ = [
    "ResponseFormatter",
    "FormatterSettings",
    "ResponseFormat",
    "OverflowPolicy",
    "EntityKind",
    "TokenEstimate",
    "StructureOptimizer",
    "SizeEstimator",
    "create_error_response",
    "estimate_tokens",
    "generate_summary",
    "prune_structure",
    "reduce_entity",
]
