"""Logging setup shared by structlog and the standard library loggers."""

import logging
import logging.config
from typing import Any

import structlog

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "mcp.server.lowlevel.server")


def configure_logging(
    log_level: str = "INFO", rich_tracebacks: bool = False, colored_logs: bool = True
) -> dict[str, Any]:
    """
    Route structlog and stdlib logging through one console renderer on stderr.

    stdout is left untouched because the stdio transport speaks MCP over it.

    Args:
        log_level: Minimum level to emit
        rich_tracebacks: Render exceptions with rich instead of plain tracebacks
        colored_logs: Colorize console output

    Returns:
        The ``logging.config.dictConfig`` dictionary, suitable for uvicorn's
        ``log_config``
    """
    level = log_level.upper()
    exception_formatter = (
        structlog.dev.rich_traceback if rich_tracebacks else structlog.dev.plain_traceback
    )

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": shared_processors,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.dev.ConsoleRenderer(
                        colors=colored_logs, exception_formatter=exception_formatter
                    ),
                ],
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "": {"handlers": ["default"], "level": level},
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["default"], "level": level, "propagate": False},
            **{name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        },
    }
    logging.config.dictConfig(logging_config)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    return logging_config
