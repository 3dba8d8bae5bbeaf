"""Single-entity ``lens://`` resources, returned as indented JSON."""

import json
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from lens_mcp.exceptions import LensApiError, ResourceNotFoundError
from lens_mcp.lens.client import LensClient

logger = structlog.get_logger(__name__)

RESOURCE_SCHEME = "lens://"

# kind -> (URI template, name, description)
RESOURCE_TEMPLATES = {
    "account": (
        "lens://account/{address}",
        "Lens Account",
        "Lens Protocol account/profile information",
    ),
    "post": ("lens://post/{id}", "Lens Post", "Lens Protocol post/publication"),
    "app": ("lens://app/{address}", "Lens App", "Lens Protocol application information"),
    "group": ("lens://group/{address}", "Lens Group", "Lens Protocol group information"),
}

RESOURCE_KINDS = tuple(RESOURCE_TEMPLATES)


def _fetcher(client: LensClient, kind: str) -> Callable[[str], Awaitable[dict[str, Any] | None]]:
    return {
        "account": client.fetch_account,
        "post": client.fetch_post,
        "app": client.fetch_app,
        "group": client.fetch_group,
    }[kind]


def parse_resource_uri(uri: str) -> tuple[str, str]:
    """
    Split a ``lens://<kind>/<id>`` URI into its kind and identifier.

    Raises:
        ResourceNotFoundError: If the URI does not name a known kind and an id
    """
    if uri.startswith(RESOURCE_SCHEME):
        kind, _, identifier = uri[len(RESOURCE_SCHEME) :].partition("/")
        if kind in RESOURCE_KINDS and identifier:
            return kind, identifier
    raise ResourceNotFoundError(
        f"Unsupported resource URI: {uri}. Valid kinds: {', '.join(RESOURCE_KINDS)}"
    )


async def read_resource(kind: str, identifier: str, client: LensClient) -> str:
    """
    Fetch one entity and serialize it without any size shaping.

    Raises:
        ResourceNotFoundError: If the kind is unknown or the entity does not exist
        LensApiError: If the Lens request fails
    """
    if kind not in RESOURCE_KINDS:
        raise ResourceNotFoundError(
            f"Unknown resource kind: {kind}. Valid kinds: {', '.join(RESOURCE_KINDS)}"
        )
    try:
        entity = await _fetcher(client, kind)(identifier)
    except LensApiError as e:
        raise LensApiError(f"Failed to read {kind} resource: {e}", e.status_code) from e
    if entity is None:
        raise ResourceNotFoundError(f"{kind.capitalize()} not found: {identifier}")

    logger.debug("Resource read", kind=kind, identifier=identifier)
    return json.dumps(entity, indent=2, ensure_ascii=False, default=str)


async def read_lens_resource(uri: str, client: LensClient) -> str:
    """Read a ``lens://`` resource by URI."""
    kind, identifier = parse_resource_uri(uri)
    return await read_resource(kind, identifier, client)
