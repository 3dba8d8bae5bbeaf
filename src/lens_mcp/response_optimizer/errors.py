"""Error payloads returned to the calling agent instead of raised exceptions."""

from mcp.types import CallToolResult, TextContent

# Resolver and socket failures leak host details; they are reported generically
NETWORK_ERROR_MARKERS = (
    "ENOTFOUND",
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
    "Connection refused",
)

NETWORK_ERROR_MESSAGE = "Network connection failed"


def sanitize_error_message(message: str) -> str:
    """Replace connection-level failure details with a generic message."""
    if any(marker in message for marker in NETWORK_ERROR_MARKERS):
        return NETWORK_ERROR_MESSAGE
    return message


def create_error_response(
    tool_name: str, message: str, suggestion: str | None = None
) -> CallToolResult:
    """
    Build an error-flagged tool result.

    Args:
        tool_name: Tool (or pseudo-tool such as ``token_limit_exceeded``) that failed
        message: What went wrong
        suggestion: Optional corrective action for the agent

    Returns:
        CallToolResult with a single text item and ``isError`` set
    """
    text = f"❌ Error in {tool_name}: {sanitize_error_message(message)}"
    if suggestion:
        text += f"\n\n💡 Suggestion: {suggestion}"
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)
