"""Utility modules for lsp-highlight.

Provides:
- logger: get_logger for namespaced logging
"""

from lsp_highlight.utils.logger import get_logger

__all__ = ["get_logger"]
