"""Exceptions raised by the Lens MCP gateway."""


class LensMCPError(Exception):
    """Base exception class for Lens MCP errors."""

    pass


class InvalidToolInputError(LensMCPError):
    """Raised when tool arguments are missing or malformed."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.suggestion = suggestion
        super().__init__(message)


class UnknownToolError(LensMCPError):
    """Raised when a tool name is not one of the registered Lens tools."""

    def __init__(self, tool_name: str, available: list[str]):
        self.tool_name = tool_name
        self.available = available
        super().__init__(f"Unknown tool: {tool_name}")


class LensApiError(LensMCPError):
    """Raised when the Lens API call fails or returns GraphQL errors."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ResourceNotFoundError(LensMCPError):
    """Raised when a resource URI does not address a supported entity kind."""

    pass
