import os
from typing import Any

import click
import structlog
import uvicorn

from lens_mcp.config import ConfigurationError, LensMCPConfig, get_config
from lens_mcp.configure_logging import configure_logging
from lens_mcp.server import initialize_server_components, mcp

logger = structlog.get_logger(__name__)

# Environment variable name overrides for fields that don't follow the simple pattern
# Most fields auto-generate from FIELD_NAME -> FIELD_NAME.upper()
ENV_VAR_OVERRIDES = {
    "transport": "MCP_TRANSPORT",
}

# CLI option overrides for special cases
CLI_OPTION_OVERRIDES = {
    "mcp_host": "host",
    "mcp_port": "port",
}

# Type overrides for choice fields
TYPE_OVERRIDES = {
    "log_level": click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    "transport": click.Choice(["stdio", "streamable-http"], case_sensitive=False),
    "lens_environment": click.Choice(["mainnet", "testnet"], case_sensitive=False),
    "concise_overflow_policy": click.Choice(["truncate", "refuse"], case_sensitive=False),
    "detailed_overflow_policy": click.Choice(["truncate", "refuse"], case_sensitive=False),
    "raw_overflow_policy": click.Choice(["truncate", "refuse"], case_sensitive=False),
}


def _click_type(annotation: Any) -> Any:
    # For Union types (e.g., str | None), use the non-None type
    args = [arg for arg in getattr(annotation, "__args__", ()) if arg is not type(None)]
    if args:
        annotation = args[0]

    if annotation is bool:
        return bool
    if annotation is int:
        return int
    if annotation is float:
        return float
    return str


def _generate_config_params() -> list[tuple[str, str, str, Any, str]]:
    """Generate CONFIG_PARAMS from LensMCPConfig model fields.

    Field names, types and descriptions are only maintained on the Pydantic model.
    """
    params = []

    for field_name, field_info in LensMCPConfig.model_fields.items():
        # e.g. mcp_port -> MCP_PORT
        env_var = ENV_VAR_OVERRIDES.get(field_name, field_name.upper())
        # e.g. lens_timeout -> lens-timeout
        cli_option = CLI_OPTION_OVERRIDES.get(field_name, field_name.replace("_", "-"))
        param_type = TYPE_OVERRIDES.get(field_name) or _click_type(field_info.annotation)
        help_text = field_info.description or f"Configuration for {field_name}"

        params.append((field_name, env_var, cli_option, param_type, help_text))

    return params


CONFIG_PARAMS = _generate_config_params()


def _get_field_default(field_name: str) -> Any:
    """Extract the default value from a LensMCPConfig model field."""
    field_info = LensMCPConfig.model_fields.get(field_name)
    if field_info and field_info.default is not None:
        return field_info.default
    return None


def _format_default(value: Any) -> str:
    if value is None or value == "":
        return "none"
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def add_config_options(func):
    """Decorator to dynamically add all config options to the CLI command.

    CLI options use default=None to preserve the priority chain:
    CLI option > Environment variable > Pydantic Field default
    """
    for field_name, env_var, cli_option, param_type, help_text_base in reversed(CONFIG_PARAMS):
        full_help = (
            f"{help_text_base} (default: {_format_default(_get_field_default(field_name))}). "
            f"Can also be set via {env_var} environment variable."
        )
        func = click.option(
            f"--{cli_option}",
            field_name,
            type=param_type,
            help=full_help,
            default=None,
        )(func)

    return func


@click.command()
@add_config_options
def main(**kwargs: Any) -> None:
    """Lens Protocol MCP server."""
    # Keep stdout clean for the stdio transport until the configured logging is in place
    configure_logging()

    # CLI options take precedence over existing env vars
    for field_name, env_var, _, _, _ in CONFIG_PARAMS:
        value = kwargs.get(field_name)
        if value is not None:
            os.environ[env_var] = str(value).lower() if isinstance(value, bool) else str(value)

    try:
        config = get_config()

        cli_options_used = [k for k, v in kwargs.items() if v is not None]
        logger.info(
            "Configuration validation successful",
            transport=config.transport,
            lens_environment=config.lens_environment,
            config_source="cli" if cli_options_used else "env/default",
            cli_options_provided=cli_options_used if cli_options_used else None,
        )
    except ConfigurationError as e:
        logger.error("Configuration validation failed", error=str(e))
        raise click.ClickException(f"Configuration error: {e}") from e

    logging_dict = configure_logging(
        log_level=config.log_level,
        rich_tracebacks=config.rich_tracebacks,
        colored_logs=config.colored_logs,
    )

    initialize_server_components(config)

    if config.transport == "stdio":
        logger.info("Starting server", transport="stdio")
        mcp.run(transport="stdio")
        return

    logger.info("Starting server", transport=config.transport, port=config.mcp_port)
    uvicorn.run(
        "lens_mcp.server:starlette_app",
        host=config.mcp_host,
        port=config.mcp_port,
        log_config=logging_dict,
        timeout_graceful_shutdown=5,
    )


if __name__ == "__main__":
    main()
