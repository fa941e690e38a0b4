"""Structlog configuration for the bridge process.

The bridge runs next to a chat client, usually inside a container. Logs
are JSON lines by default so they can be shipped as-is; a terminal (or
FORCE_COLOR) gets the coloured console renderer instead.
"""

import logging
import os
import sys

import structlog

_TRUTHY = ("1", "true", "yes")


def _wants_console(stream) -> bool:
    if os.environ.get("FORCE_COLOR", "").lower() in _TRUTHY:
        return True
    return stream.isatty()


def configure_logging(debug: bool = False) -> None:
    """Configure structlog for the bridge.

    Args:
        debug: Also emit debug events, such as every group lookup and
            each resolver tier that was tried
    """
    stream = sys.stdout
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if _wants_console(stream):
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
