"""lsp-highlight: semantic + lexical syntax highlighting to HTML.

Combines the semantic tokens a language server reports for a file with the
lexical tokens a compiler front end produces for it, then renders the source
as an HTML fragment with one ``<span>`` per token.

Quick Start:
    >>> from lsp_highlight import TokenLegend, highlight
    >>> legend = TokenLegend(("keyword", "string"), ("declaration",))
    >>> highlight('let "hi"', [0, 0, 3, 0, 0, 0, 4, 4, 1, 0], legend=legend)
    '<span class="lsp-type-keyword">let</span> <span class="lsp-type-string">&quot;hi&quot;</span>'

    >>> # Or keep a configured Highlighter around
    >>> from lsp_highlight import Highlighter, HighlightConfig
    >>> hl = Highlighter(HighlightConfig(type_class_prefix="tok-"))
    >>> html = hl(source, data, legend=legend, position_encoding="utf-8")

Pipeline:
    data ──decode──▶ semantic ─┐
                               ├─merge──▶ tokens ──staple──▶ spans ──render──▶ HTML
    compiler tokens ──adapt──▶ lexical ─┘

Any stage failure raises a HighlightError subclass and aborts the whole file;
there is no partially highlighted output.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from lsp_highlight.config import (
    HighlightConfig,
    get_highlight_config,
    highlight_config_context,
    reset_highlight_config,
    set_highlight_config,
)
from lsp_highlight.decoder import decode, encode
from lsp_highlight.encoding import LineView, TextPositionEncoding, convert, line_length
from lsp_highlight.errors import (
    EncodingBoundaryError,
    HighlightError,
    MalformedStreamError,
    OrderingViolationError,
    RenderError,
)
from lsp_highlight.legend import DEFAULT_LEGEND, TokenLegend
from lsp_highlight.lexical import CompilerToken, CompilerTokenKind, adapt
from lsp_highlight.merge import MergeResult, merge, merge_with_stats
from lsp_highlight.profiling import (
    HighlightAccumulator,
    get_highlight_accumulator,
    profiled_highlight,
)
from lsp_highlight.renderers.html import HtmlRenderer, render
from lsp_highlight.renderers.protocol import SpanRenderer
from lsp_highlight.staple import LINE_BREAK, split_lines, staple
from lsp_highlight.tokens import AbsoluteToken, Span
from lsp_highlight.utils.logger import get_logger

__version__ = "0.1.0"

logger = get_logger(__name__)


class Highlighter:
    """High-level processor running decode, adapt, merge, staple and render.

    Usage:
        >>> hl = Highlighter()
        >>> html = hl(source, data, legend=legend)

        >>> # Inspect intermediate stages
        >>> tokens = hl.tokens(source, data, legend=legend)
        >>> spans = hl.spans(source, data, legend=legend)

    Args to every entry point:
        source: Full file text
        data: Flat semantic token stream from the language server
        legend: Negotiated legend; None selects the configured fallback
            (DEFAULT_LEGEND unless HighlightConfig.legend is set)
        position_encoding: Negotiated encoding (LSP identifier or enum);
            None selects HighlightConfig.default_encoding
        compiler_tokens: Compiler-frontend tokens, or None when no front end
            handles the file's language

    Thread Safety:
        Sets config via ContextVar for the duration of each call. Safe to
        share one instance across threads.

    """

    __slots__ = ("_config", "_renderer")

    def __init__(
        self,
        config: HighlightConfig | None = None,
        *,
        renderer: SpanRenderer | None = None,
    ) -> None:
        """Initialize highlighter.

        Args:
            config: Configuration to apply during calls (ambient config if None)
            renderer: Span renderer (HtmlRenderer if None)
        """
        self._config = config
        self._renderer = renderer or HtmlRenderer()

    @contextmanager
    def _configured(self) -> Iterator[HighlightConfig]:
        if self._config is None:
            yield get_highlight_config()
            return
        with highlight_config_context(self._config):
            yield self._config

    def __call__(
        self,
        source: str,
        data: Sequence[int],
        *,
        legend: TokenLegend | None = None,
        position_encoding: TextPositionEncoding | str | None = None,
        compiler_tokens: Sequence[CompilerToken] | None = None,
    ) -> str:
        """Highlight source and render it in one call."""
        spans = self.spans(
            source,
            data,
            legend=legend,
            position_encoding=position_encoding,
            compiler_tokens=compiler_tokens,
        )
        with self._configured():
            return self._renderer.render(spans)

    def tokens(
        self,
        source: str,
        data: Sequence[int],
        *,
        legend: TokenLegend | None = None,
        position_encoding: TextPositionEncoding | str | None = None,
        compiler_tokens: Sequence[CompilerToken] | None = None,
    ) -> list[AbsoluteToken]:
        """Decode, adapt and merge; returns the merged token stream."""
        with self._configured() as config:
            encoding = TextPositionEncoding.from_lsp(
                position_encoding if position_encoding is not None else config.default_encoding
            )
            return self._merged(
                split_lines(source), data, legend or config.legend, encoding, compiler_tokens
            )

    def spans(
        self,
        source: str,
        data: Sequence[int],
        *,
        legend: TokenLegend | None = None,
        position_encoding: TextPositionEncoding | str | None = None,
        compiler_tokens: Sequence[CompilerToken] | None = None,
    ) -> list[Span]:
        """Run the pipeline up to stapling; returns the span sequence."""
        with self._configured() as config:
            encoding = TextPositionEncoding.from_lsp(
                position_encoding if position_encoding is not None else config.default_encoding
            )
            lines = split_lines(source)
            tokens = self._merged(lines, data, legend or config.legend, encoding, compiler_tokens)
            spans = staple(tokens, lines, encoding)

        acc = get_highlight_accumulator()
        if acc is not None:
            acc.record_highlight(source_length=len(source), spans=len(spans))
        return spans

    def render(self, spans: Sequence[Span]) -> str:
        """Render spans with this highlighter's renderer and config."""
        with self._configured():
            return self._renderer.render(spans)

    @staticmethod
    def _merged(
        lines: list[str],
        data: Sequence[int],
        legend: TokenLegend | None,
        encoding: TextPositionEncoding,
        compiler_tokens: Sequence[CompilerToken] | None,
    ) -> list[AbsoluteToken]:
        if legend is None:
            logger.debug("No legend supplied, using default legend")
            legend = DEFAULT_LEGEND

        semantic = decode(data, legend)
        lexical = adapt(compiler_tokens, lines, encoding) if compiler_tokens else []
        merged = merge_with_stats(semantic, lexical)

        acc = get_highlight_accumulator()
        if acc is not None:
            acc.record_tokens(
                semantic=len(semantic),
                lexical=len(lexical),
                merged=len(merged.tokens),
                occluded=merged.occluded,
            )
        return merged.tokens


def highlight(
    source: str,
    data: Sequence[int],
    *,
    legend: TokenLegend | None = None,
    position_encoding: TextPositionEncoding | str | None = None,
    compiler_tokens: Sequence[CompilerToken] | None = None,
) -> str:
    """Highlight source to an HTML fragment.

    Args:
        source: Full file text
        data: Flat semantic token stream from the language server
        legend: Negotiated legend (DEFAULT_LEGEND if None)
        position_encoding: Negotiated encoding ("utf-16" if None)
        compiler_tokens: Compiler-frontend tokens, if any

    Returns:
        HTML fragment reproducing source with token spans.

    Raises:
        MalformedStreamError: If data cannot be decoded against legend.
        EncodingBoundaryError: If a position does not fit the text.
        OrderingViolationError: If a token stream is out of order.
    """
    return Highlighter()(
        source,
        data,
        legend=legend,
        position_encoding=position_encoding,
        compiler_tokens=compiler_tokens,
    )


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "highlight",
    "Highlighter",
    # Stages
    "adapt",
    "convert",
    "decode",
    "encode",
    "line_length",
    "merge",
    "merge_with_stats",
    "render",
    "split_lines",
    "staple",
    # Data model
    "AbsoluteToken",
    "CompilerToken",
    "CompilerTokenKind",
    "LineView",
    "MergeResult",
    "Span",
    "TextPositionEncoding",
    "TokenLegend",
    "DEFAULT_LEGEND",
    "LINE_BREAK",
    # Renderer
    "HtmlRenderer",
    "SpanRenderer",
    # Errors
    "HighlightError",
    "MalformedStreamError",
    "EncodingBoundaryError",
    "OrderingViolationError",
    "RenderError",
    # Configuration (ContextVar-based)
    "HighlightConfig",
    "get_highlight_config",
    "set_highlight_config",
    "reset_highlight_config",
    "highlight_config_context",
    # Profiling
    "HighlightAccumulator",
    "get_highlight_accumulator",
    "profiled_highlight",
]
