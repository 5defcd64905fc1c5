"""Minimal logging utilities for lsp-highlight.

Wraps the standard library logging so every pipeline stage logs under one
namespace. The library never installs handlers; applications decide where
the output goes.

Example:
    >>> from lsp_highlight.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Merged %d tokens", 42)
"""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "lsp_highlight"


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "lsp_highlight." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'lsp_highlight.mymodule'
    """
    if not (name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}.")):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
