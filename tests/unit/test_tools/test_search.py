"""Tests for the lens_search tool."""

import json

import pytest

from lens_mcp.exceptions import InvalidToolInputError, LensApiError
from lens_mcp.lens.models import PageSize
from lens_mcp.tools.schemas import LensSearchInput
from lens_mcp.tools.search import lens_search


def _account(i):
    return {"address": f"0x{i:040x}", "username": {"localName": f"alice{i}"}}


def _text(result):
    return result.content[0].text


class TestLensSearch:
    """Test lens_search per search type."""

    @pytest.mark.asyncio
    async def test_accounts(self, mock_lens_client, formatter, make_envelope):
        mock_lens_client.fetch_accounts.return_value = make_envelope(
            [_account(i) for i in range(6)], next_cursor="c2"
        )
        args = LensSearchInput.model_validate({"query": " alice ", "type": "accounts"})

        result = await lens_search(args, mock_lens_client, formatter)

        text = _text(result)
        assert result.isError is False
        assert text.startswith('🔍 Found 6 accounts matching "alice":')
        assert "• alice0 (0x0000000000000000000000000000000000000000)" in text
        assert "alice5" not in text
        assert "\n... and 1 more" in text
        assert text.endswith(
            '\n\n🔄 **More results available** - Use cursor "c2" to get next page'
        )
        mock_lens_client.fetch_accounts.assert_awaited_once_with("alice", PageSize.TEN, None)

    @pytest.mark.asyncio
    async def test_posts_use_page_size_tier_and_cursor(
        self, mock_lens_client, formatter, make_envelope, raw_post
    ):
        mock_lens_client.fetch_posts.return_value = make_envelope([raw_post])
        args = LensSearchInput.model_validate(
            {"query": "gm", "type": "posts", "limit": 25, "cursor": "c1"}
        )

        result = await lens_search(args, mock_lens_client, formatter)

        text = _text(result)
        assert text.startswith('📝 Found 1 posts matching "gm":')
        assert '📝 "gm Lens" by alice (12 ❤️, 3 💬, 0 🔄) - 2025-06-01' in text
        assert "More results available" not in text
        mock_lens_client.fetch_posts.assert_awaited_once_with(
            search_query="gm", page_size=PageSize.FIFTY, cursor="c1"
        )

    @pytest.mark.asyncio
    async def test_apps_filtered_by_name_and_description(
        self, mock_lens_client, formatter, make_envelope
    ):
        mock_lens_client.fetch_apps.return_value = make_envelope(
            [
                {"address": "0x1", "metadata": {"name": "Hey", "description": "A social app"}},
                {"address": "0x2", "metadata": {"name": "Orb", "description": "Music"}},
                {"address": "0x3", "metadata": None},
            ]
        )
        args = LensSearchInput.model_validate({"query": "SOCIAL", "type": "apps"})

        text = _text(await lens_search(args, mock_lens_client, formatter))

        assert text == '🚀 Found 1 apps matching "SOCIAL":\n• Hey - A social app'

    @pytest.mark.asyncio
    async def test_usernames_with_namespace(self, mock_lens_client, formatter, make_envelope):
        mock_lens_client.fetch_usernames.return_value = make_envelope(
            [
                {"localName": "alice", "namespace": "lens", "linkedTo": "0x1"},
                {"localName": "alicia", "namespace": None, "linkedTo": None},
            ]
        )
        args = LensSearchInput.model_validate(
            {"query": "ali", "type": "usernames", "filters": {"namespace": "lens"}}
        )

        text = _text(await lens_search(args, mock_lens_client, formatter))

        assert "• alice@lens (linked)" in text
        assert "• alicia (unlinked)" in text
        mock_lens_client.fetch_usernames.assert_awaited_once_with(
            "ali", "lens", PageSize.TEN, None
        )

    @pytest.mark.asyncio
    async def test_detailed_includes_pagination(self, mock_lens_client, formatter, make_envelope):
        mock_lens_client.fetch_groups.return_value = make_envelope(
            [{"address": "0x1", "metadata": {"name": "Builders", "description": "devs"}}],
            next_cursor="c2",
        )
        args = LensSearchInput.model_validate(
            {"query": "build", "type": "groups", "show": "detailed"}
        )

        text = _text(await lens_search(args, mock_lens_client, formatter))

        data = json.loads(text[text.index("\n{") + 1 :])
        assert data["pagination"] == {
            "hasNext": True,
            "nextCursor": "c2",
            "currentPage": 1,
            "totalShown": 1,
        }

    @pytest.mark.asyncio
    async def test_missing_type(self, mock_lens_client, formatter):
        args = LensSearchInput.model_validate({"query": "alice"})

        with pytest.raises(InvalidToolInputError) as exc_info:
            await lens_search(args, mock_lens_client, formatter)

        assert "what type of content" in str(exc_info.value)
        assert 'type="accounts"' in exc_info.value.suggestion

    @pytest.mark.asyncio
    async def test_blank_query(self, mock_lens_client, formatter):
        args = LensSearchInput.model_validate({"query": "   ", "type": "posts"})

        with pytest.raises(InvalidToolInputError):
            await lens_search(args, mock_lens_client, formatter)

    @pytest.mark.asyncio
    async def test_upstream_error_is_wrapped(self, mock_lens_client, formatter):
        mock_lens_client.fetch_accounts.side_effect = LensApiError("Rate limited", 429)
        args = LensSearchInput.model_validate({"query": "alice", "type": "accounts"})

        with pytest.raises(LensApiError) as exc_info:
            await lens_search(args, mock_lens_client, formatter)

        assert str(exc_info.value) == "Account search failed: Rate limited"
        assert exc_info.value.status_code == 429
