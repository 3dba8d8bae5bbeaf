"""Client for the Lens Protocol GraphQL API."""

from lens_mcp.lens.client import LensClient, api_url_for
from lens_mcp.lens.models import (
    FetchKind,
    PageInfo,
    PageSize,
    ReactionType,
    ReferenceType,
    page_size_for,
    to_envelope,
)

__all__ = [
    "LensClient",
    "api_url_for",
    "FetchKind",
    "PageInfo",
    "PageSize",
    "ReactionType",
    "ReferenceType",
    "page_size_for",
    "to_envelope",
]
