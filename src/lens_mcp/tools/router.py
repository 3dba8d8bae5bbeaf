"""Generic call surface for the Lens tools.

Every failure is converted into an error-flagged tool result here, so nothing
raised by a tool reaches the MCP transport.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import structlog
from mcp.types import CallToolResult
from pydantic import BaseModel, ValidationError

from lens_mcp.exceptions import InvalidToolInputError, LensMCPError, UnknownToolError
from lens_mcp.lens.client import LensClient
from lens_mcp.response_optimizer.errors import create_error_response
from lens_mcp.response_optimizer.formatter import ResponseFormatter
from lens_mcp.tools.content import lens_content
from lens_mcp.tools.ecosystem import lens_ecosystem
from lens_mcp.tools.inference import apply_inference
from lens_mcp.tools.profile import lens_profile
from lens_mcp.tools.schemas import TOOL_INPUT_MODELS
from lens_mcp.tools.search import lens_search

logger = structlog.get_logger(__name__)

ToolHandler = Callable[[Any, LensClient, ResponseFormatter], Awaitable[CallToolResult]]

TOOL_HANDLERS: dict[str, ToolHandler] = {
    "lens_search": lens_search,
    "lens_profile": lens_profile,
    "lens_content": lens_content,
    "lens_ecosystem": lens_ecosystem,
}

TOOL_NAMES = list(TOOL_HANDLERS)

INVALID_INPUT_SUGGESTION = (
    "Check the tool parameters and ensure all required fields are provided with correct types."
)


def format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as ``field: message`` pairs."""
    return ", ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def validate_arguments(name: str, arguments: Mapping[str, Any] | None) -> BaseModel:
    """
    Infer missing parameters and validate the arguments of a tool call.

    Raises:
        UnknownToolError: If the tool does not exist
        ValidationError: If the arguments do not match the tool's input model
    """
    model = TOOL_INPUT_MODELS.get(name)
    if model is None:
        raise UnknownToolError(name, TOOL_NAMES)
    return model.model_validate(apply_inference(name, arguments))


async def call_lens_tool(
    name: str,
    arguments: Mapping[str, Any] | None,
    client: LensClient,
    formatter: ResponseFormatter,
) -> CallToolResult:
    """
    Run a Lens tool and return its result.

    Args:
        name: Tool name, one of lens_search, lens_profile, lens_content, lens_ecosystem
        arguments: Raw tool arguments, natural-language hints included
        client: Lens API client
        formatter: Formatter shaping the tool output

    Returns:
        The tool result, or an error-flagged result describing what went wrong
    """
    try:
        args = validate_arguments(name, arguments)
        return await TOOL_HANDLERS[name](args, client, formatter)
    except UnknownToolError as e:
        return create_error_response(
            name, str(e), suggestion=f"Available tools: {', '.join(e.available)}"
        )
    except ValidationError as e:
        logger.info("Invalid tool input", tool_name=name, errors=e.error_count())
        return create_error_response(
            name,
            f"Invalid input: {format_validation_error(e)}",
            suggestion=INVALID_INPUT_SUGGESTION,
        )
    except InvalidToolInputError as e:
        return create_error_response(name, str(e), suggestion=e.suggestion)
    except LensMCPError as e:
        logger.warning("Tool call failed", tool_name=name, error=str(e))
        return create_error_response(name, str(e))
    except Exception as e:
        logger.exception("Unexpected error in tool call", tool_name=name)
        return create_error_response(name, f"Internal error: {type(e).__name__}")
