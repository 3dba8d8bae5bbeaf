"""Character-based token estimation for outgoing tool responses."""

import math
from typing import Any

from lens_mcp.response_optimizer.models import TokenEstimate

DEFAULT_MAX_TOKENS = 25000
CHARS_PER_TOKEN = 4


def estimate_tokens(text: Any, chars_per_token: int = CHARS_PER_TOKEN) -> int:
    """
    Estimate the number of tokens in a text string.

    Uses a fixed character-based approximation (4 characters per token by
    default) rather than a real tokenizer. Partial tokens round up.

    Args:
        text: The text to estimate tokens for
        chars_per_token: Characters counted as one token

    Returns:
        Estimated token count, 0 for empty or non-string input
    """
    if not text or not isinstance(text, str):
        return 0
    return math.ceil(len(text) / chars_per_token)


class SizeEstimator:
    """Classifies text payloads as within or over a token budget."""

    def __init__(self, max_tokens: int = DEFAULT_MAX_TOKENS, chars_per_token: int = CHARS_PER_TOKEN):
        """
        Initialize the estimator.

        Args:
            max_tokens: Token budget used for classification
            chars_per_token: Characters counted as one token
        """
        self.max_tokens = max_tokens
        self.chars_per_token = chars_per_token

    def estimate(self, text: Any) -> TokenEstimate:
        """Estimate tokens for text and check them against the budget."""
        tokens = estimate_tokens(text, self.chars_per_token)
        return TokenEstimate(
            tokens=tokens,
            within_budget=tokens <= self.max_tokens,
            budget=self.max_tokens,
        )

    def char_budget(self) -> int:
        """Number of characters that fit in the token budget."""
        return self.max_tokens * self.chars_per_token
