"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

# Per-request and per-frame chatter from the server and client stacks
_QUIET_LOGGERS = ("uvicorn.access", "websockets", "httpx", "httpcore")


def _add_service(service: str) -> structlog.types.Processor:
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", service)
        return event_dict

    return processor


def setup_logging(
    level: str = "INFO",
    fmt: str = "json",
    log_file: str = "",
    service: str = "campus-telemetry",
) -> None:
    """Configure structured logging for the telemetry server.

    structlog loggers and plain ``logging.getLogger(__name__)`` loggers share
    one processor chain, so observer context bound on a connection task shows
    up on broker and scheduler records too.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        fmt: Output format - "json" for production, "console" for development.
        log_file: Optional file path for log output. Empty = stdout only.
        service: Value of the ``service`` key stamped on every record.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_service(service),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
