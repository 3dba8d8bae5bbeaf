"""Composes the final text returned by every Lens tool."""

import json
from typing import Any

import structlog
from mcp.types import CallToolResult, TextContent

from lens_mcp.response_optimizer.errors import create_error_response
from lens_mcp.response_optimizer.models import FormatterSettings, OverflowPolicy, ResponseFormat
from lens_mcp.response_optimizer.structure_optimizer import StructureOptimizer
from lens_mcp.response_optimizer.summary import generate_summary
from lens_mcp.response_optimizer.token_counter import SizeEstimator

logger = structlog.get_logger(__name__)

# Room kept free for the truncation notice when cutting oversized text
TRUNCATION_RESERVE_CHARS = 100

TOKEN_LIMIT_TOOL_NAME = "token_limit_exceeded"


def to_json(data: Any) -> str:
    """Serialize data as indented JSON text."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def text_result(text: str) -> CallToolResult:
    """Wrap text in a successful tool result."""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)


class ResponseFormatter:
    """
    Turns result data into concise, detailed or raw tool output.

    Only the detailed mode runs the structure optimizer. Every composed text is
    measured afterwards; text over the token budget is truncated or refused
    according to the overflow policy configured for its mode.
    """

    def __init__(self, settings: FormatterSettings | None = None):
        """
        Initialize the formatter.

        Args:
            settings: Token budget, optimization target and overflow policies
        """
        self.settings = settings or FormatterSettings()
        self.estimator = SizeEstimator(
            max_tokens=self.settings.max_tokens,
            chars_per_token=self.settings.chars_per_token,
        )
        self.optimizer = StructureOptimizer(chars_per_token=self.settings.chars_per_token)

    def format(
        self,
        data: Any,
        response_format: ResponseFormat | str = ResponseFormat.CONCISE,
        summary: str | None = None,
    ) -> CallToolResult:
        """
        Format result data for the calling agent.

        Args:
            data: Result data, usually a ``{items, pageInfo}`` envelope
            response_format: One of concise, detailed or raw
            summary: Tool-specific summary; the generic one is used when omitted

        Returns:
            CallToolResult holding the text, or an error payload when the text
            exceeds the budget under the refuse policy
        """
        response_format = ResponseFormat(response_format)

        if response_format == ResponseFormat.CONCISE:
            text = summary or generate_summary(data)
        elif response_format == ResponseFormat.DETAILED:
            summary_text = summary or generate_summary(data)
            optimized = self.optimizer.optimize(data, self.settings.target_tokens)
            text = f"{summary_text}\n\n{to_json(optimized)}"
        else:
            text = to_json(data)

        estimate = self.estimator.estimate(text)
        if estimate.within_budget:
            return text_result(text)

        policy = self.settings.policy_for(response_format)
        logger.warning(
            "Formatted response exceeds token budget",
            response_format=str(response_format),
            tokens=estimate.tokens,
            budget=estimate.budget,
            policy=str(policy),
        )
        if policy == OverflowPolicy.TRUNCATE:
            return text_result(self.truncate(text))
        return self.refuse(estimate.tokens)

    def truncate(self, text: str) -> str:
        """Cut text to the character budget and append a truncation notice."""
        cut = max(self.estimator.char_budget() - TRUNCATION_RESERVE_CHARS, 0)
        notice = (
            f"\n\n⚠️ Response truncated to ~{self.settings.max_tokens} tokens. "
            "Use pagination for more."
        )
        return text[:cut] + notice

    def refuse(self, tokens: int) -> CallToolResult:
        """Build the error payload returned instead of oversized text."""
        suggestion = (
            f"Response size ({tokens} tokens) exceeds limit ({self.settings.max_tokens}). "
            "Consider using:\n"
            '• show="concise" for summary only\n'
            "• Pagination with cursor parameter\n"
            "• Narrower include parameters"
        )
        return create_error_response(
            TOKEN_LIMIT_TOOL_NAME, f"Response too large ({tokens} tokens)", suggestion
        )
