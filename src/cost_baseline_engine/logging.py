"""Structured logging setup for the baseline engine."""

import logging
import sys

import structlog

from cost_baseline_engine.config.schema import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure structlog and the standard library root logger.

    JSON output is the default so that Lambda log lines stay machine-readable.
    """
    config = config or LoggingConfig()
    min_level = getattr(logging, config.level.upper(), logging.INFO)

    if config.json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route boto3/botocore records through stdout as well
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=min_level)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
