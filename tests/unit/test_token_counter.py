"""Tests for character-based token estimation."""

import pytest

from lens_mcp.response_optimizer.token_counter import SizeEstimator, estimate_tokens


class TestEstimateTokens:
    """Test estimate_tokens."""

    def test_empty_string(self):
        assert estimate_tokens("") == 0

    def test_non_string_input(self):
        assert estimate_tokens(None) == 0
        assert estimate_tokens(1234) == 0

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("a", 1), ("abcd", 1), ("abcde", 2), ("x" * 400, 100)],
    )
    def test_partial_tokens_round_up(self, text, expected):
        assert estimate_tokens(text) == expected

    def test_custom_chars_per_token(self):
        assert estimate_tokens("abcdef", chars_per_token=3) == 2


class TestSizeEstimator:
    """Test SizeEstimator."""

    def test_initialization_with_defaults(self):
        estimator = SizeEstimator()

        assert estimator.max_tokens == 25000
        assert estimator.chars_per_token == 4

    def test_within_budget(self):
        estimate = SizeEstimator(max_tokens=10).estimate("x" * 40)

        assert estimate.tokens == 10
        assert estimate.within_budget is True
        assert estimate.budget == 10

    def test_over_budget(self):
        estimate = SizeEstimator(max_tokens=10).estimate("x" * 41)

        assert estimate.tokens == 11
        assert estimate.within_budget is False

    def test_char_budget(self):
        assert SizeEstimator(max_tokens=100, chars_per_token=4).char_budget() == 400
