"""Tests for the generic tool call surface."""

import pytest

from lens_mcp.exceptions import InvalidToolInputError, LensApiError, UnknownToolError
from lens_mcp.lens.models import PageSize
from lens_mcp.tools.router import TOOL_NAMES, call_lens_tool, validate_arguments
from lens_mcp.tools.schemas import LensContentInput, LensSearchInput


def _text(result):
    return result.content[0].text


class TestValidateArguments:
    """Test validate_arguments."""

    def test_inference_fills_missing_type(self):
        args = validate_arguments("lens_search", {"for": "lens usernames", "query": "ali"})

        assert isinstance(args, LensSearchInput)
        assert args.type == "usernames"
        assert args.search_for == "lens usernames"

    def test_deprecated_about_alias(self):
        args = validate_arguments("lens_content", {"about": "comments", "target": "post_1"})

        assert isinstance(args, LensContentInput)
        assert args.about == "references"

    def test_unknown_tool(self):
        with pytest.raises(UnknownToolError) as exc_info:
            validate_arguments("lens_unknown", {})

        assert exc_info.value.available == TOOL_NAMES


class TestCallLensTool:
    """Test call_lens_tool error conversion."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self, mock_lens_client, formatter):
        result = await call_lens_tool("x", {}, mock_lens_client, formatter)

        assert result.isError is True
        assert _text(result) == (
            "❌ Error in x: Unknown tool: x\n\n💡 Suggestion: Available tools: "
            "lens_search, lens_profile, lens_content, lens_ecosystem"
        )

    @pytest.mark.asyncio
    async def test_validation_error(self, mock_lens_client, formatter):
        result = await call_lens_tool(
            "lens_search", {"query": "alice", "limit": 0}, mock_lens_client, formatter
        )

        text = _text(result)
        assert result.isError is True
        assert text.startswith("❌ Error in lens_search: Invalid input: limit:")
        assert "Check the tool parameters" in text
        mock_lens_client.fetch_accounts.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_required_field(self, mock_lens_client, formatter):
        result = await call_lens_tool("lens_search", None, mock_lens_client, formatter)

        assert "query: Field required" in _text(result)

    @pytest.mark.asyncio
    async def test_invalid_tool_input_keeps_suggestion(self, mock_lens_client, formatter):
        result = await call_lens_tool(
            "lens_ecosystem", {"explore": "something vague"}, mock_lens_client, formatter
        )

        text = _text(result)
        assert result.isError is True
        assert "I need to know what aspect of the ecosystem" in text
        assert '💡 Suggestion: Examples:\n• Popular apps: lens_ecosystem(view="apps")' in text

    @pytest.mark.asyncio
    async def test_lens_api_error_is_sanitized(self, mock_lens_client, formatter):
        mock_lens_client.fetch_apps.side_effect = LensApiError(
            "getaddrinfo failed for api.lens.xyz"
        )

        result = await call_lens_tool(
            "lens_ecosystem", {"view": "apps"}, mock_lens_client, formatter
        )

        assert _text(result) == "❌ Error in lens_ecosystem: Network connection failed"

    @pytest.mark.asyncio
    async def test_lens_api_error_message_kept(self, mock_lens_client, formatter):
        mock_lens_client.fetch_apps.side_effect = LensApiError("Rate limited", 429)

        result = await call_lens_tool(
            "lens_ecosystem", {"view": "apps"}, mock_lens_client, formatter
        )

        assert _text(result) == (
            "❌ Error in lens_ecosystem: Failed to fetch apps: Rate limited"
        )

    @pytest.mark.asyncio
    async def test_unexpected_error_hides_details(self, mock_lens_client, formatter):
        mock_lens_client.fetch_apps.side_effect = RuntimeError("secret internals")

        result = await call_lens_tool(
            "lens_ecosystem", {"view": "apps"}, mock_lens_client, formatter
        )

        assert result.isError is True
        assert _text(result) == "❌ Error in lens_ecosystem: Internal error: RuntimeError"

    @pytest.mark.asyncio
    async def test_inferred_call_reaches_client(
        self, mock_lens_client, formatter, make_envelope
    ):
        mock_lens_client.fetch_apps.return_value = make_envelope(
            [{"address": "0x1", "metadata": {"name": "Hey", "description": "social app"}}]
        )

        result = await call_lens_tool(
            "lens_search",
            {"for": "popular apps", "query": "social"},
            mock_lens_client,
            formatter,
        )

        assert result.isError is False
        assert _text(result) == '🚀 Found 1 apps matching "social":\n• Hey - social app'
        mock_lens_client.fetch_apps.assert_awaited_once_with(PageSize.TEN, None)

    @pytest.mark.asyncio
    async def test_content_error_from_handler(self, mock_lens_client, formatter):
        result = await call_lens_tool(
            "lens_content",
            {"about": "reactions", "target": "alice"},
            mock_lens_client,
            formatter,
        )

        assert _text(result).startswith(
            "❌ Error in lens_content: Reactions analysis requires a post ID as target"
        )


def test_invalid_tool_input_error_carries_suggestion():
    error = InvalidToolInputError("bad", suggestion="try again")

    assert str(error) == "bad"
    assert error.suggestion == "try again"
