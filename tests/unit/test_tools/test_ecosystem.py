"""Tests for the lens_ecosystem tool."""

import json

import pytest

from lens_mcp.exceptions import InvalidToolInputError, LensApiError
from lens_mcp.lens.models import PageSize
from lens_mcp.tools.ecosystem import lens_ecosystem
from lens_mcp.tools.schemas import LensEcosystemInput


def _app(name, description=None, platforms=None):
    return {
        "address": f"0x{name.lower():0>40}",
        "metadata": {"name": name, "description": description, "platforms": platforms},
    }


def _text(result):
    return result.content[0].text


class TestLensEcosystem:
    """Test lens_ecosystem views."""

    @pytest.mark.asyncio
    async def test_apps_with_focus(self, mock_lens_client, formatter, make_envelope):
        mock_lens_client.fetch_apps.return_value = make_envelope(
            [_app("Hey", "Social feed"), _app("Orb", "Music app")]
        )
        args = LensEcosystemInput(view="apps", focus="music")

        text = _text(await lens_ecosystem(args, mock_lens_client, formatter))

        assert text == "🚀 1 applications in the Lens Protocol ecosystem:\n• Orb: Music app"
        mock_lens_client.fetch_apps.assert_awaited_once_with(PageSize.FIFTY)

    @pytest.mark.asyncio
    async def test_groups(self, mock_lens_client, formatter, make_envelope):
        mock_lens_client.fetch_groups.return_value = make_envelope([_app("Builders")])
        args = LensEcosystemInput(view="groups", limit=5)

        text = _text(await lens_ecosystem(args, mock_lens_client, formatter))

        assert text == "👥 1 community groups on Lens Protocol:\n• Builders: No description"
        mock_lens_client.fetch_groups.assert_awaited_once_with(PageSize.TEN)

    @pytest.mark.asyncio
    async def test_trending(self, mock_lens_client, formatter, make_envelope, raw_post):
        mock_lens_client.fetch_posts_to_explore.return_value = make_envelope([raw_post])
        args = LensEcosystemInput(view="trending", timeframe="all")

        text = _text(await lens_ecosystem(args, mock_lens_client, formatter))

        assert text == (
            '📈 1 trending posts on Lens Protocol:\n• "gm Lens" by alice (12 ❤️, 3 💬, 0 🔄)'
        )

    @pytest.mark.asyncio
    async def test_trending_respects_timeframe(
        self, mock_lens_client, formatter, make_envelope, raw_post
    ):
        # The fixture post is dated 2025-06-01
        mock_lens_client.fetch_posts_to_explore.return_value = make_envelope([raw_post])
        args = LensEcosystemInput(view="trending", timeframe="1d")

        text = _text(await lens_ecosystem(args, mock_lens_client, formatter))

        assert text == "📈 0 trending posts on Lens Protocol:"

    @pytest.mark.asyncio
    async def test_statistics_tolerates_failed_section(
        self, mock_lens_client, formatter, make_envelope, raw_post
    ):
        mock_lens_client.fetch_apps.return_value = make_envelope([_app("Hey"), _app("Orb")])
        mock_lens_client.fetch_groups.side_effect = LensApiError("boom")
        mock_lens_client.fetch_posts_to_explore.return_value = make_envelope([raw_post])
        args = LensEcosystemInput(view="statistics", show="detailed")

        text = _text(await lens_ecosystem(args, mock_lens_client, formatter))

        summary, body = text.split("\n\n", 1)
        assert summary == (
            "📊 Lens Protocol Ecosystem Statistics:\n"
            "🚀 Active Applications: 2+\n"
            "👥 Community Groups: 0+\n"
            "📝 Recent Posts: 1+ trending\n"
            "💡 Platform Health: Active"
        )
        data = json.loads(body)
        assert data["groups"] == []
        assert len(data["apps"]) == 2

    @pytest.mark.asyncio
    async def test_insights(self, mock_lens_client, formatter, make_envelope):
        mock_lens_client.fetch_apps.return_value = make_envelope(
            [
                _app("Hey", platforms=["web", "ios"]),
                _app("Orb", platforms=["web"]),
                _app("Misc"),
            ]
        )
        args = LensEcosystemInput(view="insights")

        text = _text(await lens_ecosystem(args, mock_lens_client, formatter))

        assert "📊 Total Applications: 3" in text
        assert "🏷️ Platforms: web, ios, Other" in text
        assert "⭐ Most Common Platform: web" in text

    @pytest.mark.asyncio
    async def test_upstream_error_is_wrapped(self, mock_lens_client, formatter):
        mock_lens_client.fetch_apps.side_effect = LensApiError("Bad gateway", 502)

        with pytest.raises(LensApiError, match="Failed to fetch apps: Bad gateway"):
            await lens_ecosystem(LensEcosystemInput(view="apps"), mock_lens_client, formatter)

    @pytest.mark.asyncio
    async def test_missing_view(self, mock_lens_client, formatter):
        with pytest.raises(InvalidToolInputError) as exc_info:
            await lens_ecosystem(LensEcosystemInput(), mock_lens_client, formatter)

        assert 'lens_ecosystem(view="apps")' in exc_info.value.suggestion
