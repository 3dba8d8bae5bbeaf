"""
GraphQL client for the public Lens Protocol API.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Self

import httpx
import structlog

from lens_mcp.exceptions import LensApiError
from lens_mcp.lens import queries
from lens_mcp.lens.models import FetchKind, PageSize, ReactionType, ReferenceType, to_envelope

logger = structlog.get_logger(__name__)

MAINNET_API_URL = "https://api.lens.xyz/graphql"
TESTNET_API_URL = "https://api.testnet.lens.xyz/graphql"

# kind -> (query, root field, key wrapping each item)
FETCH_OPERATIONS: dict[FetchKind, tuple[str, str, str | None]] = {
    FetchKind.ACCOUNTS: (queries.ACCOUNTS_QUERY, "accounts", None),
    FetchKind.POSTS: (queries.POSTS_QUERY, "posts", None),
    FetchKind.POSTS_TO_EXPLORE: (queries.POSTS_TO_EXPLORE_QUERY, "mlPostsExplore", None),
    FetchKind.POST_REACTIONS: (queries.POST_REACTIONS_QUERY, "postReactions", None),
    FetchKind.POST_REFERENCES: (queries.POST_REFERENCES_QUERY, "postReferences", None),
    FetchKind.TIMELINE_HIGHLIGHTS: (queries.TIMELINE_HIGHLIGHTS_QUERY, "timelineHighlights", None),
    FetchKind.FOLLOWERS: (queries.FOLLOWERS_QUERY, "followers", "follower"),
    FetchKind.FOLLOWING: (queries.FOLLOWING_QUERY, "following", "following"),
    FetchKind.APPS: (queries.APPS_QUERY, "apps", None),
    FetchKind.GROUPS: (queries.GROUPS_QUERY, "groups", None),
    FetchKind.USERNAMES: (queries.USERNAMES_QUERY, "usernames", None),
}


def api_url_for(environment: str) -> str:
    """Return the GraphQL endpoint for a Lens environment name."""
    return TESTNET_API_URL if environment == "testnet" else MAINNET_API_URL


class LensClient:
    """Client for reading data from the Lens API."""

    def __init__(self, api_url: str = MAINNET_API_URL, timeout: float = 30.0):
        """
        Initialize the Lens client.

        Args:
            api_url: GraphQL endpoint of the Lens API
            timeout: Request timeout in seconds
        """
        self.api_url = api_url
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating it if necessary."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def execute(self, query: str, request: Mapping[str, Any]) -> dict[str, Any]:
        """
        Run a GraphQL query with a single ``request`` variable.

        Args:
            query: GraphQL document
            request: Value of the ``$request`` input variable

        Returns:
            The ``data`` object of the response

        Raises:
            LensApiError: On transport failure, HTTP error status, an
                undecodable body, or GraphQL errors in the response
        """
        body = {"query": query, "variables": {"request": dict(request)}}
        try:
            response = await self.client.post(self.api_url, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning("Lens API returned an error status", status_code=status_code)
            raise LensApiError(
                f"Lens API returned HTTP {status_code}", status_code=status_code
            ) from e
        except httpx.ConnectError as e:
            logger.warning("Failed to connect to Lens API", api_url=self.api_url, error=str(e))
            raise LensApiError("Network connection failed") from e
        except httpx.RequestError as e:
            logger.warning("Lens API request failed", api_url=self.api_url, error=str(e))
            raise LensApiError(str(e) or type(e).__name__) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise LensApiError("Lens API returned an invalid JSON response") from e

        errors = payload.get("errors") if isinstance(payload, Mapping) else None
        if errors:
            message = "; ".join(
                str(error.get("message", error)) if isinstance(error, Mapping) else str(error)
                for error in errors
            )
            logger.warning("Lens API returned GraphQL errors", errors=message)
            raise LensApiError(message)

        data = payload.get("data") if isinstance(payload, Mapping) else None
        return data or {}

    async def fetch(
        self,
        kind: FetchKind | str,
        request: Mapping[str, Any] | None = None,
        page_size: PageSize = PageSize.TEN,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """
        Fetch one page of a paginated collection.

        Args:
            kind: Collection to fetch
            request: Kind-specific request fields (filters, account, post id...)
            page_size: Page size tier
            cursor: Cursor of the page to fetch, first page when omitted

        Returns:
            A ``{items, pageInfo: {prev, next, hasNext}}`` envelope

        Raises:
            LensApiError: If the request fails
        """
        kind = FetchKind(kind)
        query, field, item_key = FETCH_OPERATIONS[kind]

        variables: dict[str, Any] = {**(request or {}), "pageSize": PageSize(page_size).value}
        if cursor:
            variables["cursor"] = cursor

        logger.debug("Fetching from Lens API", kind=kind.value, page_size=variables["pageSize"])
        data = await self.execute(query, variables)
        envelope = to_envelope(data.get(field), item_key=item_key)
        logger.debug(
            "Fetched from Lens API",
            kind=kind.value,
            count=len(envelope["items"]),
            has_next=envelope["pageInfo"]["hasNext"],
        )
        return envelope

    async def _fetch_one(self, query: str, field: str, request: Mapping[str, Any]) -> Any:
        data = await self.execute(query, request)
        return data.get(field)

    async def fetch_accounts(
        self, query: str, page_size: PageSize = PageSize.TEN, cursor: str | None = None
    ) -> dict[str, Any]:
        """Search accounts by username."""
        request = {"filter": {"searchBy": {"localNameQuery": query}}}
        return await self.fetch(FetchKind.ACCOUNTS, request, page_size, cursor)

    async def fetch_account(self, address: str) -> dict[str, Any] | None:
        """Fetch a single account by address, None if it does not exist."""
        return await self._fetch_one(queries.ACCOUNT_QUERY, "account", {"address": address})

    async def fetch_account_stats(self, address: str) -> dict[str, Any] | None:
        """Fetch follow and feed counters of an account."""
        return await self._fetch_one(
            queries.ACCOUNT_STATS_QUERY, "accountStats", {"account": address}
        )

    async def fetch_followers(
        self, address: str, page_size: PageSize = PageSize.TEN, cursor: str | None = None
    ) -> dict[str, Any]:
        """Fetch accounts following an account."""
        return await self.fetch(FetchKind.FOLLOWERS, {"account": address}, page_size, cursor)

    async def fetch_following(
        self, address: str, page_size: PageSize = PageSize.TEN, cursor: str | None = None
    ) -> dict[str, Any]:
        """Fetch accounts an account follows."""
        return await self.fetch(FetchKind.FOLLOWING, {"account": address}, page_size, cursor)

    async def fetch_posts(
        self,
        authors: Sequence[str] | None = None,
        search_query: str | None = None,
        page_size: PageSize = PageSize.TEN,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """Fetch posts by author addresses and/or a full-text search query."""
        post_filter: dict[str, Any] = {}
        if authors:
            post_filter["authors"] = list(authors)
        if search_query:
            post_filter["searchQuery"] = search_query
        request = {"filter": post_filter} if post_filter else {}
        return await self.fetch(FetchKind.POSTS, request, page_size, cursor)

    async def fetch_post(self, post_id: str) -> dict[str, Any] | None:
        """Fetch a single post or repost by id."""
        return await self._fetch_one(queries.POST_QUERY, "post", {"post": post_id})

    async def fetch_posts_to_explore(
        self, page_size: PageSize = PageSize.TEN, cursor: str | None = None
    ) -> dict[str, Any]:
        """Fetch the explore feed of recommended posts."""
        return await self.fetch(FetchKind.POSTS_TO_EXPLORE, None, page_size, cursor)

    async def fetch_post_reactions(
        self,
        post_id: str,
        reaction_types: Sequence[ReactionType] | None = None,
        page_size: PageSize = PageSize.TEN,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """Fetch accounts that reacted to a post, optionally by reaction type."""
        request: dict[str, Any] = {"post": post_id}
        if reaction_types:
            request["filter"] = {"anyOf": [ReactionType(t).value for t in reaction_types]}
        return await self.fetch(FetchKind.POST_REACTIONS, request, page_size, cursor)

    async def fetch_post_references(
        self,
        post_id: str,
        reference_types: Sequence[ReferenceType] = (ReferenceType.COMMENT_ON,),
        page_size: PageSize = PageSize.TEN,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """Fetch comments, quotes or reposts referencing a post."""
        request = {
            "referencedPost": post_id,
            "referenceTypes": [ReferenceType(t).value for t in reference_types],
        }
        return await self.fetch(FetchKind.POST_REFERENCES, request, page_size, cursor)

    async def fetch_timeline_highlights(
        self, address: str, page_size: PageSize = PageSize.TEN, cursor: str | None = None
    ) -> dict[str, Any]:
        """Fetch timeline highlights of an account from the global feed."""
        request = {"account": address, "filter": {"feeds": [{"globalFeed": True}]}}
        return await self.fetch(FetchKind.TIMELINE_HIGHLIGHTS, request, page_size, cursor)

    async def fetch_apps(
        self, page_size: PageSize = PageSize.TEN, cursor: str | None = None
    ) -> dict[str, Any]:
        """Fetch registered Lens apps."""
        return await self.fetch(FetchKind.APPS, None, page_size, cursor)

    async def fetch_app(self, address: str) -> dict[str, Any] | None:
        return await self._fetch_one(queries.APP_QUERY, "app", {"app": address})

    async def fetch_groups(
        self, page_size: PageSize = PageSize.TEN, cursor: str | None = None
    ) -> dict[str, Any]:
        """Fetch Lens groups."""
        return await self.fetch(FetchKind.GROUPS, None, page_size, cursor)

    async def fetch_group(self, address: str) -> dict[str, Any] | None:
        return await self._fetch_one(queries.GROUP_QUERY, "group", {"group": address})

    async def fetch_usernames(
        self,
        query: str,
        namespace: str | None = None,
        page_size: PageSize = PageSize.TEN,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """Search minted usernames, optionally within one namespace."""
        username_filter: dict[str, Any] = {"localNameQuery": query}
        if namespace:
            username_filter["namespace"] = namespace
        return await self.fetch(FetchKind.USERNAMES, {"filter": username_filter}, page_size, cursor)
