"""Logging setup for bddbrowser."""

import logging
import sys

from bddbrowser.logging.formatters import StreamFormatter, StreamRoutingFilter
from bddbrowser.logging.handlers import (
    RESPONSE_LOGGER_NAME,
    ResponseConsoleHandler,
    status_style,
)

__all__ = [
    "RESPONSE_LOGGER_NAME",
    "ResponseConsoleHandler",
    "StreamFormatter",
    "StreamRoutingFilter",
    "configure_logging",
    "configure_response_logging",
    "status_style",
]


def configure_logging(debug: bool = False, fmt: str = "%(message)s") -> None:
    """Route bddbrowser logs to stdout/stderr and enable response logging in debug.

    Parameters
    ----------
    debug : bool
        Log at DEBUG level and print every network response
    fmt : str
        Format string for the stream handlers
    """
    package_logger = logging.getLogger("bddbrowser")

    if not any(
        isinstance(h.formatter, StreamFormatter) for h in package_logger.handlers
    ):
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(StreamFormatter(fmt))
        stdout_handler.addFilter(StreamRoutingFilter("stdout"))

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(StreamFormatter(fmt))
        stderr_handler.addFilter(StreamRoutingFilter("stderr"))

        package_logger.addHandler(stdout_handler)
        package_logger.addHandler(stderr_handler)
        package_logger.propagate = False

    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    configure_response_logging(debug)


def configure_response_logging(enabled: bool) -> logging.Logger:
    """Attach or detach the colored response handler."""
    response_logger = logging.getLogger(RESPONSE_LOGGER_NAME)
    response_logger.propagate = False
    existing = [
        h for h in response_logger.handlers if isinstance(h, ResponseConsoleHandler)
    ]

    if enabled:
        if not existing:
            response_logger.addHandler(ResponseConsoleHandler())
        response_logger.setLevel(logging.INFO)
    else:
        for handler in existing:
            response_logger.removeHandler(handler)

    return response_logger
