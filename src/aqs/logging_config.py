"""Logging for the AQS query client.

Every module logs under the ``aqs`` logger hierarchy, which carries a
``NullHandler`` so that an application that never configures logging sees
nothing. Scripts and notebooks can call ``setup_logging`` to get readable or
JSON output for this client only; the root logger is left alone.
"""

from __future__ import annotations

import logging
from typing import IO, Optional

from pythonjsonlogger.json import JsonFormatter

LOGGER_NAME = "aqs"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


class _ClientHandlerMixin:
    """Marks handlers installed by ``setup_logging`` so a second call replaces them."""


class _ClientStreamHandler(_ClientHandlerMixin, logging.StreamHandler):
    pass


class _ClientFileHandler(_ClientHandlerMixin, logging.FileHandler):
    pass


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    stream: Optional[IO[str]] = None,
    log_file: Optional[str] = None,
    propagate: bool = False,
) -> logging.Handler:
    """Send ``aqs`` log records to a stream or file.

    Args:
        level: Threshold for the ``aqs`` logger (DEBUG shows every request url,
            with credentials masked)
        json_format: Emit one JSON object per record via python-json-logger
        stream: Stream for output; defaults to stderr. Ignored with ``log_file``
        log_file: Append records to this file instead of a stream
        propagate: Also pass records on to the root logger's handlers

    Returns:
        The handler that was installed, replacing any from an earlier call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for old in [h for h in logger.handlers if isinstance(h, _ClientHandlerMixin)]:
        logger.removeHandler(old)
        old.close()

    handler: logging.Handler
    if log_file:
        handler = _ClientFileHandler(log_file, encoding="utf-8")
    else:
        handler = _ClientStreamHandler(stream)
    if json_format:
        handler.setFormatter(JsonFormatter(JSON_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = propagate
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_api_call(url: str, method: str = "GET", **context) -> None:
    """Record an outbound request. ``url`` must already be redacted."""
    get_logger(f"{LOGGER_NAME}.api").debug(f"{method} {url}", extra=context)


def log_error_with_context(error: Exception, operation: str, **context) -> None:
    """Record a failed request with its traceback before it propagates."""
    get_logger(f"{LOGGER_NAME}.errors").error(f"{operation} failed: {error}", extra=context, exc_info=True)
