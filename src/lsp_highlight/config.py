"""ContextVar-based highlight configuration for lsp-highlight.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per Highlighter call, read by every stage in the context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    # In Highlighter
    hl = Highlighter(HighlightConfig(type_class_prefix="tok-"))
    html = hl(source, data)  # Sets config internally via ContextVar

    # Direct stage usage
    from lsp_highlight.config import highlight_config_context, HighlightConfig

    with highlight_config_context(HighlightConfig(lexical_type_map={2: "keyword"})):
        tokens = adapt(compiler_tokens, lines, TextPositionEncoding.UTF16)

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lsp_highlight.encoding import TextPositionEncoding

if TYPE_CHECKING:
    from lsp_highlight.legend import TokenLegend


@dataclass(frozen=True, slots=True)
class HighlightConfig:
    """Immutable highlight configuration.

    Attributes:
        type_class_prefix: CSS class prefix for token types
        modifier_class_prefix: CSS class prefix for token modifiers
        default_encoding: Position encoding when the server announces none
        lexical_type_map: Compiler token kind to type name override
        legend: Legend to use when the server declines to send one
            (None selects DEFAULT_LEGEND)

    """

    type_class_prefix: str = "lsp-type-"
    modifier_class_prefix: str = "lsp-modifier-"
    default_encoding: TextPositionEncoding = TextPositionEncoding.UTF16
    lexical_type_map: Mapping[int, str] | None = None
    legend: TokenLegend | None = None

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> HighlightConfig:
        """Create HighlightConfig from dictionary.

        Only includes keys that are valid HighlightConfig fields; unknown keys
        are silently ignored. default_encoding may be given as its LSP
        identifier ("utf-8", "utf-16", "utf-32").

        Args:
            config_dict: Dictionary with config values. Keys should match
                HighlightConfig attribute names.

        Returns:
            New HighlightConfig instance with values from dict.

        Example:
            >>> config = HighlightConfig.from_dict({
            ...     "default_encoding": "utf-8",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.default_encoding
            <TextPositionEncoding.BYTE: 'utf-8'>

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "default_encoding" in filtered:
            filtered["default_encoding"] = TextPositionEncoding.from_lsp(
                filtered["default_encoding"]
            )
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: HighlightConfig = HighlightConfig()

_highlight_config: ContextVar[HighlightConfig] = ContextVar(
    "highlight_config",
    default=_DEFAULT_CONFIG,
)


def get_highlight_config() -> HighlightConfig:
    """Get current highlight configuration (thread-local)."""
    return _highlight_config.get()


def set_highlight_config(config: HighlightConfig) -> None:
    """Set highlight configuration for current context.

    Args:
        config: HighlightConfig instance to use for this context.

    """
    _highlight_config.set(config)


def reset_highlight_config() -> None:
    """Reset to the default configuration."""
    _highlight_config.set(_DEFAULT_CONFIG)


@contextmanager
def highlight_config_context(config: HighlightConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config on exit, even if an exception is raised.

    Args:
        config: HighlightConfig to use within the context.

    Yields:
        None

    """
    previous = _highlight_config.get()
    _highlight_config.set(config)
    try:
        yield
    finally:
        _highlight_config.set(previous)


__all__ = [
    "HighlightConfig",
    "get_highlight_config",
    "highlight_config_context",
    "reset_highlight_config",
    "set_highlight_config",
]
