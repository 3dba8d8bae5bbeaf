"""Agent-facing Lens tools."""

from lens_mcp.tools.router import TOOL_NAMES, call_lens_tool

__all__ = ["TOOL_NAMES", "call_lens_tool"]
