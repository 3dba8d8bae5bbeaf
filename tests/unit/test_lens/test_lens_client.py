"""
Tests for the Lens GraphQL client.
"""

import json

import httpx
import pytest

from lens_mcp.exceptions import LensApiError
from lens_mcp.lens.client import (
    MAINNET_API_URL,
    TESTNET_API_URL,
    LensClient,
    api_url_for,
)
from lens_mcp.lens.models import FetchKind, PageSize, ReactionType, ReferenceType

ADDRESS = "0x1234567890abcdef1234567890abcdef12345678"


def _client_with(handler) -> tuple[LensClient, list[dict]]:
    """Create a LensClient whose HTTP calls go to ``handler``; returns the sent bodies."""
    sent: list[dict] = []

    def record(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content))
        return handler(request)

    client = LensClient(api_url=MAINNET_API_URL)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(record))
    return client, sent


def _page(field, items, next_cursor=None):
    return {"data": {field: {"items": items, "pageInfo": {"prev": None, "next": next_cursor}}}}


def test_api_url_for():
    assert api_url_for("mainnet") == MAINNET_API_URL
    assert api_url_for("testnet") == TESTNET_API_URL


@pytest.mark.asyncio
async def test_execute_sends_request_variable():
    client, sent = _client_with(lambda r: httpx.Response(200, json={"data": {"ok": True}}))

    data = await client.execute("query Q { ok }", {"address": ADDRESS})

    assert data == {"ok": True}
    assert sent == [{"query": "query Q { ok }", "variables": {"request": {"address": ADDRESS}}}]
    await client.close()


@pytest.mark.asyncio
async def test_fetch_builds_envelope():
    client, sent = _client_with(
        lambda r: httpx.Response(200, json=_page("accounts", [{"address": ADDRESS}], "c2"))
    )

    result = await client.fetch_accounts("alice", PageSize.FIFTY, cursor="c1")

    assert result == {
        "items": [{"address": ADDRESS}],
        "pageInfo": {"prev": None, "next": "c2", "hasNext": True},
    }
    assert sent[0]["variables"]["request"] == {
        "filter": {"searchBy": {"localNameQuery": "alice"}},
        "pageSize": "FIFTY",
        "cursor": "c1",
    }
    await client.close()


@pytest.mark.asyncio
async def test_fetch_without_cursor_omits_it():
    client, sent = _client_with(lambda r: httpx.Response(200, json=_page("apps", [])))

    result = await client.fetch(FetchKind.APPS)

    assert result["pageInfo"]["hasNext"] is False
    assert sent[0]["variables"]["request"] == {"pageSize": "TEN"}
    await client.close()


@pytest.mark.asyncio
async def test_followers_are_unwrapped():
    client, _ = _client_with(
        lambda r: httpx.Response(
            200, json=_page("followers", [{"follower": {"address": ADDRESS}}])
        )
    )

    result = await client.fetch_followers(ADDRESS)

    assert result["items"] == [{"address": ADDRESS}]
    await client.close()


@pytest.mark.asyncio
async def test_missing_collection_gives_empty_envelope():
    client, _ = _client_with(lambda r: httpx.Response(200, json={"data": {}}))

    result = await client.fetch_groups()

    assert result == {"items": [], "pageInfo": {"prev": None, "next": None, "hasNext": False}}
    await client.close()


@pytest.mark.asyncio
async def test_post_filters():
    client, sent = _client_with(lambda r: httpx.Response(200, json=_page("postReactions", [])))

    await client.fetch_post_reactions("123", [ReactionType.UPVOTE])

    assert sent[0]["variables"]["request"]["filter"] == {"anyOf": ["UPVOTE"]}
    await client.close()


@pytest.mark.asyncio
async def test_post_references_default_to_comments():
    client, sent = _client_with(lambda r: httpx.Response(200, json=_page("postReferences", [])))

    await client.fetch_post_references("123")
    await client.fetch_post_references("123", [ReferenceType.QUOTE_OF, ReferenceType.REPOST_OF])

    assert sent[0]["variables"]["request"]["referenceTypes"] == ["COMMENT_ON"]
    assert sent[1]["variables"]["request"]["referenceTypes"] == ["QUOTE_OF", "REPOST_OF"]
    await client.close()


@pytest.mark.asyncio
async def test_fetch_single_entity():
    client, sent = _client_with(
        lambda r: httpx.Response(200, json={"data": {"account": {"address": ADDRESS}}})
    )

    account = await client.fetch_account(ADDRESS)

    assert account == {"address": ADDRESS}
    assert sent[0]["variables"]["request"] == {"address": ADDRESS}
    await client.close()


@pytest.mark.asyncio
async def test_fetch_single_entity_not_found():
    client, _ = _client_with(lambda r: httpx.Response(200, json={"data": {"post": None}}))

    assert await client.fetch_post("123") is None
    await client.close()


@pytest.mark.asyncio
async def test_http_error_status():
    client, _ = _client_with(lambda r: httpx.Response(503, text="unavailable"))

    with pytest.raises(LensApiError) as exc_info:
        await client.fetch_apps()

    assert exc_info.value.status_code == 503
    assert str(exc_info.value) == "Lens API returned HTTP 503"
    await client.close()


@pytest.mark.asyncio
async def test_graphql_errors():
    client, _ = _client_with(
        lambda r: httpx.Response(
            200, json={"data": None, "errors": [{"message": "Bad cursor"}, {"message": "Oops"}]}
        )
    )

    with pytest.raises(LensApiError, match="Bad cursor; Oops"):
        await client.fetch_posts(search_query="gm")
    await client.close()


@pytest.mark.asyncio
async def test_connection_failure():
    def refuse(request):
        raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

    client, _ = _client_with(refuse)

    with pytest.raises(LensApiError, match="Network connection failed"):
        await client.fetch_account(ADDRESS)
    await client.close()


@pytest.mark.asyncio
async def test_invalid_json():
    client, _ = _client_with(lambda r: httpx.Response(200, text="<html>"))

    with pytest.raises(LensApiError, match="invalid JSON"):
        await client.fetch_account(ADDRESS)
    await client.close()


@pytest.mark.asyncio
async def test_context_manager():
    async with LensClient() as client:
        assert client._client is not None

    # Client should be closed after exiting context
    assert client._client is None


@pytest.mark.asyncio
async def test_client_lazy_initialization():
    client = LensClient(timeout=5.0)
    assert client._client is None

    http_client = client.client

    assert isinstance(http_client, httpx.AsyncClient)
    assert client.client is http_client
    await client.close()
    assert client._client is None
