"""Structured log output for the schemaview logger tree."""

import logging
import sys

import structlog

from schemaview.config import settings

LOGGER_NAME = "schemaview"


def configure_logging(log_level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    """Render records from ``schemaview.*`` loggers through structlog.

    Only the library's own logger is touched; the application's root logger
    keeps its handlers. Records carry the bound schema URI, if any.

    Args:
        log_level: Logging level string (debug/info/warning/error). Defaults to settings.log_level.
        json_output: If True, output JSON. If False, console lines. Defaults to settings.json_logs.
    """
    log_level = log_level or settings.log_level
    if json_output is None:
        json_output = settings.json_logs

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        foreign_pre_chain=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.propagate = False
    return logger


def bind_schema_context(uri: str | None) -> None:
    """Bind the schema being compiled to log records emitted in this context."""
    structlog.contextvars.bind_contextvars(schema_uri=uri or "<anonymous>")


def clear_schema_context() -> None:
    structlog.contextvars.unbind_contextvars("schema_uri")
