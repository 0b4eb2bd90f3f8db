"""Structured JSON logging setup."""

import logging
import sys

import structlog
from structlog.types import Processor

from farm_reports.common.config import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure structured logging.

    Args:
        config: Logging configuration. Uses defaults if not provided.
    """
    if config is None:
        config = LoggingConfig()

    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    # Logs go to stderr so exported reports can be piped from stdout
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    handlers: list[logging.Handler] = [handler]
    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(getattr(logging, config.level.upper()))

    package_logger = logging.getLogger("farm_reports")
    package_logger.setLevel(getattr(logging, config.level.upper()))

    # httpx logs every farm API request at INFO
    http_level = logging.DEBUG if config.level.upper() == "DEBUG" else logging.WARNING
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(http_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name. Defaults to 'farm_reports'.

    Returns:
        Bound logger instance.
    """
    logger_name = name or "farm_reports"
    return structlog.get_logger(logger_name)
