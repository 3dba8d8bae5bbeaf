"""Shared test fixtures for lens-mcp tests."""

from unittest.mock import AsyncMock

import pytest

from lens_mcp.lens.client import LensClient
from lens_mcp.response_optimizer.formatter import ResponseFormatter

ALICE_ADDRESS = "0x1234567890abcdef1234567890abcdef12345678"
POST_ID = "1" * 64


def _envelope(items, next_cursor=None):
    return {
        "items": list(items),
        "pageInfo": {"prev": None, "next": next_cursor, "hasNext": bool(next_cursor)},
    }


@pytest.fixture
def make_envelope():
    """Build a paginated ``{items, pageInfo}`` envelope as returned by LensClient."""
    return _envelope


@pytest.fixture
def raw_account():
    """An account as returned by the Lens API."""
    return {
        "__typename": "Account",
        "address": ALICE_ADDRESS,
        "owner": "0x0000000000000000000000000000000000000001",
        "createdAt": "2025-01-01T00:00:00Z",
        "username": {
            "__typename": "Username",
            "localName": "alice",
            "value": "lens/alice",
            "namespace": "0x1aA55B9042f08f45825dC4b651B64c9F98Af4615",
        },
        "metadata": {
            "__typename": "AccountMetadata",
            "name": "Alice",
            "bio": "Building on Lens",
            "picture": "https://example.com/alice.png",
            "coverPicture": None,
        },
    }


@pytest.fixture
def raw_post(raw_account):
    """A post as returned by the Lens API."""
    return {
        "__typename": "Post",
        "id": POST_ID,
        "slug": "abc123",
        "timestamp": "2025-06-01T12:00:00Z",
        "author": raw_account,
        "metadata": {
            "__typename": "TextOnlyMetadata",
            "id": "meta-1",
            "content": "gm Lens",
            "contentWarning": None,
            "tags": [],
        },
        "stats": {
            "__typename": "PostStats",
            "upvotes": 12,
            "comments": 3,
            "reposts": 0,
            "quotes": 1,
            "bookmarks": 2,
        },
        "app": {"address": "0x2222222222222222222222222222222222222222", "metadata": None},
        "commentOn": None,
        "quoteOf": None,
        "root": None,
    }


@pytest.fixture
def mock_lens_client():
    """LensClient with every network method mocked."""
    return AsyncMock(spec=LensClient)


@pytest.fixture
def formatter():
    """ResponseFormatter with default budgets."""
    return ResponseFormatter()
