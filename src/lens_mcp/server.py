import time
from contextlib import asynccontextmanager
from typing import Annotated, Any, Literal

import structlog
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult
from pydantic import Field
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from lens_mcp.config import LensMCPConfig
from lens_mcp.lens.client import LensClient
from lens_mcp.lens.models import MAX_ITEMS
from lens_mcp.resources import RESOURCE_SCHEME, RESOURCE_TEMPLATES, read_lens_resource
from lens_mcp.response_optimizer.formatter import ResponseFormatter
from lens_mcp.response_optimizer.models import ResponseFormat
from lens_mcp.tools import call_lens_tool
from lens_mcp.tools.schemas import (
    MAX_DEPTH,
    ContentFilters,
    ContentInclude,
    EcosystemView,
    ProfileAnalysis,
    ProfileInclude,
    SearchFilters,
    SearchType,
    Timeframe,
)

logger = structlog.get_logger(__name__)

SERVICE_NAME = "lens-mcp"

WELCOME_MESSAGE = """Lens Protocol MCP Server

Access Lens Protocol data through the Model Context Protocol.

Setup Instructions:

For most MCP clients:
{
  "mcpServers": {
    "lens-protocol": {
      "serverUrl": "http://<host>:<port>/mcp"
    }
  }
}

Available Tools:
- lens_search: Find accounts, posts, usernames, apps and groups
- lens_profile: Analyze an account's identity, social graph and activity
- lens_content: Analyze posts, reactions, comments and quotes
- lens_ecosystem: Explore trending content, apps, groups and platform statistics

Resources:
- lens://account/{address}
- lens://post/{id}
- lens://app/{address}
- lens://group/{address}

Health Check: /health
"""

# Initialize FastMCP - host and port are overridden during startup
mcp = FastMCP(name=SERVICE_NAME, host="0.0.0.0", port=3000)

# Global instances - will be initialized with proper config values
lens_client: LensClient | None = None
formatter: ResponseFormatter | None = None
_config: LensMCPConfig | None = None
_tools_registered = False

ShowParam = Annotated[
    ResponseFormat,
    Field(
        description="concise: summary only, detailed: summary plus optimized data, "
        "raw: the complete upstream data"
    ),
]


@asynccontextmanager
async def _performance_timer(operation_name: str):
    """Context manager for timing operations."""
    start_time = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start_time
        logger.info(f"{operation_name} completed", duration_seconds=duration)


def _compact(arguments: dict[str, Any]) -> dict[str, Any]:
    """Drop parameters the caller left unset so inference can fill them."""
    compacted = {}
    for key, value in arguments.items():
        if value is None:
            continue
        if hasattr(value, "model_dump"):
            value = value.model_dump(exclude_none=True)
        compacted[key] = value
    return compacted


async def _call(name: str, arguments: dict[str, Any]) -> CallToolResult:
    if lens_client is None or formatter is None:
        raise RuntimeError("Server components not initialized")
    async with _performance_timer(name):
        return await call_lens_tool(name, _compact(arguments), lens_client, formatter)


async def lens_search(
    query: Annotated[str, Field(description="Search terms or keywords")],
    search_for: Annotated[
        str | None,
        Field(
            validation_alias="for",
            description='What you want to find (natural language): "crypto accounts", '
            '"DeFi posts", "lens usernames", "popular apps"',
        ),
    ] = None,
    type: Annotated[
        SearchType | None, Field(description="Type of content to search for")
    ] = None,
    show: ShowParam = ResponseFormat.CONCISE,
    limit: Annotated[
        int, Field(ge=1, le=MAX_ITEMS, description="Maximum results to return per page")
    ] = 10,
    cursor: Annotated[
        str | None,
        Field(description="Pagination cursor returned by a previous response"),
    ] = None,
    filters: SearchFilters | None = None,
) -> CallToolResult:
    """
    Search across the Lens Protocol ecosystem for accounts, posts, usernames, apps or groups.

    Describe what you are looking for in `for` and the type is inferred, or set `type`
    explicitly. Results are paginated; pass the returned cursor to get the next page.
    """
    return await _call(
        "lens_search",
        {
            "for": search_for,
            "query": query,
            "type": type,
            "show": show,
            "limit": limit,
            "cursor": cursor,
            "filters": filters,
        },
    )


async def lens_profile(
    who: Annotated[
        str, Field(description="Ethereum address or username of the account to analyze")
    ],
    include: Annotated[
        list[ProfileInclude] | None,
        Field(description="Sections to include: basic, social, influence, activity, network"),
    ] = None,
    analyze: Annotated[
        ProfileAnalysis | None, Field(description="Type of analysis to perform on the profile")
    ] = None,
    show: ShowParam = ResponseFormat.CONCISE,
    depth: Annotated[
        int,
        Field(ge=1, le=MAX_DEPTH, description="How many social connections or posts to analyze"),
    ] = 25,
) -> CallToolResult:
    """
    Analyze a Lens account: identity, social connections, influence and recent activity.
    """
    return await _call(
        "lens_profile",
        {"who": who, "include": include, "analyze": analyze, "show": show, "depth": depth},
    )


async def lens_content(
    target: Annotated[
        str,
        Field(
            description="Post ID for post analysis, or user address or username for user content"
        ),
    ],
    what: Annotated[
        str | None,
        Field(
            description='What you want to analyze (natural language): "reactions to this post", '
            '"comments on post", "popular posts by user"'
        ),
    ] = None,
    about: Annotated[
        Literal["posts", "reactions", "references", "highlights", "engagement", "comments"]
        | None,
        Field(description="Type of content analysis to perform"),
    ] = None,
    show: ShowParam = ResponseFormat.CONCISE,
    include: Annotated[
        list[ContentInclude] | None,
        Field(description="What types of engagement to include"),
    ] = None,
    limit: Annotated[
        int, Field(ge=1, le=MAX_ITEMS, description="Maximum items to analyze per page")
    ] = 10,
    cursor: Annotated[
        str | None, Field(description="Pagination cursor to fetch next page of results")
    ] = None,
    filters: ContentFilters | None = None,
) -> CallToolResult:
    """
    Analyze content on Lens: posts of an account, or reactions and references of a post.
    """
    return await _call(
        "lens_content",
        {
            "what": what,
            "about": about,
            "target": target,
            "show": show,
            "include": include,
            "limit": limit,
            "cursor": cursor,
            "filters": filters,
        },
    )


async def lens_ecosystem(
    explore: Annotated[
        str | None,
        Field(
            description="What aspect of the ecosystem to explore (natural language): "
            '"trending apps", "platform statistics", "popular groups", "ecosystem health"'
        ),
    ] = None,
    view: Annotated[EcosystemView | None, Field(description="Type of ecosystem view")] = None,
    focus: Annotated[
        str | None, Field(description="Specific app, group or area to focus on")
    ] = None,
    show: ShowParam = ResponseFormat.CONCISE,
    timeframe: Annotated[
        Timeframe, Field(description="Time period for trending analysis")
    ] = "7d",
    limit: Annotated[int, Field(ge=1, le=MAX_ITEMS, description="Maximum items to return")] = 20,
) -> CallToolResult:
    """
    Explore the Lens ecosystem: trending content, apps, groups, statistics and insights.
    """
    return await _call(
        "lens_ecosystem",
        {
            "explore": explore,
            "view": view,
            "focus": focus,
            "show": show,
            "timeframe": timeframe,
            "limit": limit,
        },
    )


async def _read(kind: str, identifier: str) -> str:
    if lens_client is None:
        raise RuntimeError("Server components not initialized")
    return await read_lens_resource(f"{RESOURCE_SCHEME}{kind}/{identifier}", lens_client)


async def account_resource(address: str) -> str:
    return await _read("account", address)


async def post_resource(id: str) -> str:
    return await _read("post", id)


async def app_resource(address: str) -> str:
    return await _read("app", address)


async def group_resource(address: str) -> str:
    return await _read("group", address)


RESOURCE_READERS = {
    "account": account_resource,
    "post": post_resource,
    "app": app_resource,
    "group": group_resource,
}


def _register_tools() -> None:
    """Register the Lens tools and single-entity resources once per process."""
    global _tools_registered
    if _tools_registered:
        return

    for tool in (lens_search, lens_profile, lens_content, lens_ecosystem):
        mcp.tool()(tool)

    for kind, (uri_template, name, description) in RESOURCE_TEMPLATES.items():
        mcp.resource(
            uri_template, name=name, description=description, mime_type="application/json"
        )(RESOURCE_READERS[kind])

    logger.info(
        "Registered tools and resources",
        tools=["lens_search", "lens_profile", "lens_content", "lens_ecosystem"],
        resources=[template for template, _, _ in RESOURCE_TEMPLATES.values()],
    )
    _tools_registered = True


def initialize_server_components(config: LensMCPConfig) -> None:
    """Initialize server components with configuration values."""
    global lens_client, formatter, _config
    _config = config
    lens_client = LensClient(api_url=config.api_url, timeout=config.lens_timeout)
    formatter = ResponseFormatter(config.formatter_settings())
    mcp.settings.host = config.mcp_host
    mcp.settings.port = config.mcp_port

    _register_tools()
    logger.info(
        "Server components initialized",
        api_url=config.api_url,
        max_response_tokens=config.max_response_tokens,
    )


@mcp.custom_route("/health", methods=["GET"])
def health_check(request: Request) -> Response:
    return JSONResponse({"status": "ok", "service": SERVICE_NAME})


@mcp.custom_route("/", methods=["GET"])
def welcome(request: Request) -> Response:
    return PlainTextResponse(WELCOME_MESSAGE)


starlette_app = mcp.streamable_http_app()
