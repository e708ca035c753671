"""Logging utilities for the type generator."""

from __future__ import annotations

import logging

_LOGGER_NAME = "openapi_to_types"

# Verbose output names the pipeline stage (parser, composition, emitter...)
_FORMAT = "[openapi_to_types] %(levelname)s %(message)s"
_VERBOSE_FORMAT = "[%(name)s] %(levelname)s %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a stage logger, e.g. get_logger("parser") -> openapi_to_types.parser."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Configure the package logger with console output on stderr.

    Warnings recorded on declarations are logged at WARNING as they are
    found; `verbose` adds the DEBUG trace of every pipeline stage.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(_VERBOSE_FORMAT if verbose else _FORMAT))
    logger.addHandler(stream_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
