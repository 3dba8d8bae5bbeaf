"""Configuration validation and management for the Lens MCP server."""

import os
from typing import Any, Literal, Optional

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from lens_mcp.lens.client import api_url_for
from lens_mcp.response_optimizer.models import FormatterSettings, OverflowPolicy

logger = structlog.get_logger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration validation errors."""

    pass


class LensMCPConfig(BaseModel):
    """Configuration schema for the Lens MCP server with validation."""

    # Server configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    colored_logs: bool = Field(default=True, description="Whether to enable colored logs")
    rich_tracebacks: bool = Field(default=False, description="Whether to enable rich tracebacks")
    transport: Literal["stdio", "streamable-http"] = Field(
        default="stdio",
        description="MCP transport (stdio or streamable-http)",
    )
    mcp_host: str = Field(
        default="0.0.0.0",  # nosec B104 - HTTP transport is meant to be reachable
        min_length=1,
        description="Host the streamable-http transport binds to",
    )
    mcp_port: int = Field(
        default=3000, ge=1024, le=65535, description="Port for the MCP server (1024-65535)"
    )

    # Lens API configuration
    lens_environment: Literal["mainnet", "testnet"] = Field(
        default="mainnet",
        description="Lens network to query (mainnet or testnet)",
    )

    @field_validator("transport", "lens_environment", mode="before")
    @classmethod
    def normalize_choice(cls, v) -> str:
        """Normalize choice values to lowercase for case-insensitive matching."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    lens_api_url: str | None = Field(
        default=None,
        description="Override for the Lens GraphQL endpoint; derived from lens_environment if unset",
    )
    lens_timeout: float = Field(
        default=30.0, gt=0, le=300, description="Timeout for Lens API requests in seconds"
    )

    # Response shaping configuration
    max_response_tokens: int = Field(
        default=25000,
        ge=100,
        description="Token budget for any text returned by a tool",
    )
    detailed_target_tokens: int = Field(
        default=15000,
        ge=1,
        description="Size below which detailed responses skip structural optimization",
    )
    chars_per_token: int = Field(
        default=4, ge=1, le=16, description="Characters counted as one token when estimating"
    )
    concise_overflow_policy: OverflowPolicy = Field(
        default=OverflowPolicy.TRUNCATE,
        description="What to do with concise text over the token budget (truncate or refuse)",
    )
    detailed_overflow_policy: OverflowPolicy = Field(
        default=OverflowPolicy.REFUSE,
        description="What to do with detailed text over the token budget (truncate or refuse)",
    )
    raw_overflow_policy: OverflowPolicy = Field(
        default=OverflowPolicy.REFUSE,
        description="What to do with raw JSON over the token budget (truncate or refuse)",
    )

    @model_validator(mode="after")
    def validate_token_budgets(self):
        """Ensure the optimization target fits inside the response budget."""
        if self.detailed_target_tokens > self.max_response_tokens:
            raise ValueError(
                f"Detailed target tokens ({self.detailed_target_tokens}) must not exceed "
                f"max response tokens ({self.max_response_tokens})"
            )
        return self

    @property
    def api_url(self) -> str:
        """GraphQL endpoint to query."""
        return self.lens_api_url or api_url_for(self.lens_environment)

    def formatter_settings(self) -> FormatterSettings:
        """Build the response formatter settings from this configuration."""
        return FormatterSettings(
            max_tokens=self.max_response_tokens,
            target_tokens=self.detailed_target_tokens,
            chars_per_token=self.chars_per_token,
            concise_policy=self.concise_overflow_policy,
            detailed_policy=self.detailed_overflow_policy,
            raw_policy=self.raw_overflow_policy,
        )


def _populate_config_from_env() -> dict[str, Any]:
    """Populate configuration dictionary from environment variables."""
    config_data = {}

    # PORT is accepted for hosting platforms that inject it; MCP_PORT wins
    env_mappings = {
        "LOG_LEVEL": "log_level",
        "COLORED_LOGS": "colored_logs",
        "RICH_TRACEBACKS": "rich_tracebacks",
        "MCP_TRANSPORT": "transport",
        "MCP_HOST": "mcp_host",
        "PORT": "mcp_port",
        "MCP_PORT": "mcp_port",
        "LENS_ENVIRONMENT": "lens_environment",
        "LENS_API_URL": "lens_api_url",
        "LENS_TIMEOUT": "lens_timeout",
        "MAX_RESPONSE_TOKENS": "max_response_tokens",
        "DETAILED_TARGET_TOKENS": "detailed_target_tokens",
        "CHARS_PER_TOKEN": "chars_per_token",
        "CONCISE_OVERFLOW_POLICY": "concise_overflow_policy",
        "DETAILED_OVERFLOW_POLICY": "detailed_overflow_policy",
        "RAW_OVERFLOW_POLICY": "raw_overflow_policy",
    }

    for env_var, field_name in env_mappings.items():
        value = os.getenv(env_var)
        if value is not None:
            config_data[field_name] = value

    return config_data


def load_config() -> LensMCPConfig:
    """Load and validate configuration from environment variables."""
    try:
        # Only values actually set in the environment are passed, so the
        # Field defaults stay the single source of truth
        config_data = _populate_config_from_env()
        config = LensMCPConfig(**config_data)

        logger.info("Configuration loaded and validated successfully", config=config.model_dump())
        return config

    except ValidationError as e:
        error_msg = f"Configuration validation failed: {e}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg) from e
    except Exception as e:
        error_msg = f"Failed to load configuration: {e}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg) from e


# Global configuration instance
_config: Optional[LensMCPConfig] = None


def get_config() -> LensMCPConfig:
    """Get the global configuration instance, loading it if necessary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> LensMCPConfig:
    """Reload configuration from environment variables."""
    global _config
    _config = load_config()
    return _config
