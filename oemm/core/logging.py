"""
Logging setup - OEMM Scoring Engine
oemm/core/logging.py

Routes structlog events and stdlib log records through one handler.
"""

import logging
import sys

import structlog


def get_logger(name: str):
    """
    structlog logger bound to the stdlib logger ``name``.

    Events end up in stdlib logging whether or not configure_logging() ran,
    so a host that never configures logging gets stdlib's level filtering
    and handlers instead of structlog's default stdout printer.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: DEBUG / INFO / WARNING / ERROR.
        fmt: "json" for machine-readable output, "console" for humans.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
